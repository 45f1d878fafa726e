import dataclasses
import enum
import itertools
from typing import ClassVar, List, Optional

from . import vocabulary as voc


class Visibility(enum.Enum):
    """
    Member access of a demangled object
    """
    PUBLIC = 'public'
    PROTECTED = 'protected'
    PRIVATE = 'private'
    GLOBAL = 'global'


class AggregateKind(enum.Flag):
    """
    Keyword that introduces a user-defined type. The decoder sets at
    most one of these, but all of them are rendered if more are set.
    Members are declared in rendering order.
    """
    NONE = 0
    UNION = enum.auto()
    STRUCT = enum.auto()
    ENUM = enum.auto()
    CLASS = enum.auto()
    COCLASS = enum.auto()
    COINTERFACE = enum.auto()
    COMPLEX = enum.auto()

    @property
    def keyword(self) -> str:
        return self.name.lower()


class NamingContext:
    """
    Mints placeholder names for function types that don't have one.
    Each top-level decode owns one of these, so names are unique within
    a single demangled tree.
    """
    def __init__(self):
        self._ids = itertools.count()

    def next_name(self) -> str:
        return f'{voc.DEFAULT_NAME_PREFIX}{next(self._ids)}'


@dataclasses.dataclass
class DemangledObject:
    """
    Base class for every node produced by the decoder
    """
    mangled: str = ''
    original_demangled: Optional[str] = None
    name: str = ''

    # Enclosing entity, only used to build qualified names
    namespace: Optional['DemangledObject'] = None

    special_prefix: Optional[str] = None
    visibility: Optional[Visibility] = None
    storage_class: Optional[str] = None

    is_static: bool = False
    is_virtual: bool = False
    is_thunk: bool = False

    is_const: bool = False
    is_volatile: bool = False
    is_pointer64: bool = False
    is_unaligned: bool = False
    is_restrict: bool = False
    based_name: Optional[str] = None
    member_scope: Optional[str] = None

    # Used for plate comments if original_demangled isn't available
    backup_plate_comment: Optional[str] = None


@dataclasses.dataclass
class DemangledTemplate:
    """
    Explicit template arguments, in declaration order
    """
    parameters: List['DemangledDataType'] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class DemangledType(DemangledObject):
    """
    A named type, possibly with template arguments. Namespace chains are
    made of these.
    """
    template: Optional[DemangledTemplate] = None


@dataclasses.dataclass
class DemangledDataType(DemangledType):
    """
    A data type as it appears in a parameter list, template argument
    list or return type
    """
    aggregate: AggregateKind = AggregateKind.NONE
    enum_type: Optional[str] = None
    is_signed: bool = False
    is_unsigned: bool = False
    pointer_levels: int = 0
    array_dimensions: int = 0
    is_reference: bool = False
    is_rvalue_reference: bool = False
    is_template: bool = False
    is_varargs: bool = False

    # Qualifiers written after each "*", innermost pointer first
    pointer_qualifiers: List[str] = dataclasses.field(default_factory=list)

    # Declarator around the (absent) name for arrays and pointers to
    # them, e.g. "(*" and ")[4]" for "int (*)[4]"
    declarator_prefix: str = ''
    declarator_suffix: str = ''

    @property
    def is_array(self) -> bool:
        return self.array_dimensions > 0

    @property
    def is_pointer(self) -> bool:
        return self.pointer_levels > 0

    @property
    def is_void(self) -> bool:
        return self.name == voc.VOID

    @property
    def is_primitive(self) -> bool:
        """
        True for an unadorned builtin type such as "int" or "long double"
        """
        if (self.is_array or self.aggregate or self.is_pointer or self.is_pointer64
                or self.is_signed or self.is_template or self.is_varargs):
            return False
        return self.name in voc.PRIMITIVES


@dataclasses.dataclass
class DemangledFunction(DemangledObject):
    """
    A function symbol
    """
    # None for constructors and destructors. For conversion operators,
    # this is the type converted to.
    return_type: Optional[DemangledDataType] = None
    calling_convention: Optional[str] = None
    parameters: List[DemangledDataType] = dataclasses.field(default_factory=list)
    template: Optional[DemangledTemplate] = None

    # Constructors of a template specialization can carry their own
    # bracketed type, separate from the class's template arguments
    templated_constructor_type: Optional[str] = None

    is_trailing_const: bool = False
    is_trailing_volatile: bool = False
    is_trailing_pointer64: bool = False
    is_trailing_unaligned: bool = False
    is_trailing_restrict: bool = False
    throw_attribute: Optional[str] = None

    is_overloaded_operator: bool = False
    is_type_cast: bool = False
    this_passed_on_stack: bool = True

    # (this adjustment, vtable displacement) of a thunk symbol
    thunk_offsets: tuple = ()


@dataclasses.dataclass
class FunctionIndirection(DemangledDataType):
    """
    Base class for function types reached through some indirection
    (pointer, reference, or none at all)
    """
    TYPE_STRING: ClassVar[str] = voc.PTR_NOTATION

    name: str = voc.DEFAULT_NAME_PREFIX
    pointer_levels: int = 1

    calling_convention: Optional[str] = None
    modifier: str = ''
    is_const_pointer: bool = False
    return_type: Optional[DemangledDataType] = None
    parameters: List[DemangledDataType] = dataclasses.field(default_factory=list)

    # Class name of a pointer-to-member-function
    parent_name: Optional[str] = None

    is_trailing_pointer64: bool = False
    is_trailing_unaligned: bool = False
    is_trailing_restrict: bool = False

    # Parenthesize the declarator, as in "void (*)(int)"
    display_parens: bool = True

    # Array subscripts for an array of these, e.g. "[4]"
    subscript: str = ''


@dataclasses.dataclass
class FunctionPointer(FunctionIndirection):
    TYPE_STRING: ClassVar[str] = voc.PTR_NOTATION


@dataclasses.dataclass
class FunctionReference(FunctionIndirection):
    TYPE_STRING: ClassVar[str] = voc.REF_NOTATION


@dataclasses.dataclass
class FunctionIndirect(FunctionIndirection):
    TYPE_STRING: ClassVar[str] = ''

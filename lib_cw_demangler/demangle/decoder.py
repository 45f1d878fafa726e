# decoder.py
# CodeWarrior symbol grammar -> demangled objects


import dataclasses
import re
from typing import List, Optional, Tuple, Type, Union

from ..errors import DemangleError
from . import render as lib_render
from . import vocabulary as voc
from .objects import (
    DemangledDataType,
    DemangledFunction,
    DemangledTemplate,
    DemangledType,
    FunctionIndirect,
    FunctionIndirection,
    FunctionPointer,
    FunctionReference,
    NamingContext,
)


THUNK_PATTERN = re.compile(r'@(\d+)@(?:(\d+)@)?')
ARRAY_PATTERN = re.compile(r'A(\d+)_')
LITERAL_PATTERN = re.compile(r'-?\d+')

NameSegment = Tuple[str, Optional[DemangledTemplate]]


def split_symbol(sym: str) -> Tuple[str, str]:
    """
    Split a symbol at the "__" that separates the name from its type
    information. Returns (name, rest).
    """
    i = len(sym) - len(sym.lstrip('_'))
    if i == len(sym):
        raise DemangleError('Symbol is only underscores', sym)

    depth = 0
    while i < len(sym) - 1:
        c = sym[i]
        if c == '<':
            depth += 1
        elif c == '>':
            depth -= 1
        elif depth == 0 and sym.startswith('__', i):
            # Extra underscores belong to the name
            while sym.startswith('___', i):
                i += 1
            if i + 2 < len(sym) and sym[i + 2] in voc.SEPARATOR_FOLLOWERS:
                return sym[:i], sym[i + 2:]
        i += 1

    raise DemangleError('No type information found', sym)


def split_template_arguments(args: str) -> List[str]:
    """
    Split the text between a template's angle brackets at its top-level
    commas
    """
    if not args:
        return []

    pieces = []
    depth = 0
    start = 0
    for i, c in enumerate(args):
        if c == '<':
            depth += 1
        elif c == '>':
            depth -= 1
        elif c == ',' and depth == 0:
            pieces.append(args[start:i])
            start = i + 1
    pieces.append(args[start:])

    if depth:
        raise DemangleError('Mismatched template brackets', args)
    if not all(pieces):
        raise DemangleError('Empty template argument', args)

    return pieces


class _Demangler:
    """
    Recursive-descent decoder for a single symbol. Parsing methods take
    the unparsed remainder of the input and return (result, new
    remainder).
    """
    def __init__(self, mangled: str):
        self.mangled = mangled
        self.naming = NamingContext()


    def demangle_symbol(self, sym: str) -> Union[DemangledFunction, DemangledDataType]:
        """
        Decode a whole symbol, including any special prefix
        """
        if sym.startswith(voc.LOCAL_PREFIX) or sym.startswith(voc.GUARD_PREFIX):
            return self.demangle_static_local(sym)

        match = THUNK_PATTERN.match(sym)
        if match:
            func = self.demangle_symbol(sym[match.end():])
            if not isinstance(func, DemangledFunction):
                raise DemangleError('Thunk to something other than a function', sym)
            func.is_thunk = True
            func.thunk_offsets = tuple(int(g) for g in match.groups() if g is not None)
            return func

        name, rest = split_symbol(sym)
        return self.demangle_name_and_type(name, rest)


    def demangle_static_local(self, sym: str) -> DemangledDataType:
        """
        "@LOCAL@func@var" is a static variable inside func.
        "@GUARD@func@var" is the flag guarding its initialization.
        Either may have a trailing "@N" to tell apart same-named
        variables.
        """
        is_guard = sym.startswith(voc.GUARD_PREFIX)
        body = sym[len(voc.LOCAL_PREFIX):]

        func_sym, sep, variable = body.rpartition('@')
        if sep and variable.isdecimal():
            func_sym, sep, variable = func_sym.rpartition('@')
        if not sep or not func_sym or not variable:
            raise DemangleError('Malformed static local symbol', sym)

        func = self.demangle_symbol(func_sym)

        if is_guard:
            variable += voc.GUARD_SUFFIX

        return DemangledDataType(mangled=self.mangled, name=variable, namespace=func)


    def demangle_name_and_type(self, name: str, rest: str) -> Union[DemangledFunction, DemangledDataType]:
        """
        Decode everything after the "__", given the name that came
        before it
        """
        node = rest

        parent = None
        if node[0] == voc.QUALIFIED_CODE or node[0].isdigit():
            segments, node = self.parse_qualified_name(node)
            parent = self.build_namespace(segments, DemangledType)

        is_const = is_volatile = is_static = False
        while node and node[0] in 'CVS':
            if node[0] == 'C':
                is_const = True
            elif node[0] == 'V':
                is_volatile = True
            else:
                is_static = True
            node = node[1:]

        if not node:
            if parent is None or is_const or is_volatile or is_static:
                raise DemangleError('Qualifiers without a function type', rest)
            # Data symbol (static member, vtable, ...)
            if name == voc.VIRTUAL_TABLE:
                return DemangledDataType(
                    mangled=self.mangled,
                    name=lib_render.namespace_string(parent) + voc.VIRTUAL_TABLE_SUFFIX)
            base_name, template = self.parse_template_name(name)
            return DemangledDataType(
                mangled=self.mangled,
                name=base_name,
                namespace=parent,
                template=template,
                is_template=template is not None)

        if node[0] != voc.FUNCTION_CODE:
            raise DemangleError('Expected a function type', node)

        parameters, node = self.parse_parameters(node[1:])
        return_type = None
        if node:
            return_type, node = self.parse_type(node[1:])
        if node:
            raise DemangleError('Unable to parse full symbol', node)

        func = DemangledFunction(
            mangled=self.mangled,
            namespace=parent,
            parameters=parameters,
            return_type=return_type,
            is_static=is_static,
            is_trailing_const=is_const,
            is_trailing_volatile=is_volatile)
        self.apply_function_name(func, name, parent)
        return func


    def apply_function_name(self, func: DemangledFunction, name: str, parent: Optional[DemangledType]) -> None:
        """
        Work out the display name of a function, translating special
        names (constructors, destructors, operators)
        """
        if name.startswith(voc.CONVERSION_OPERATOR_PREFIX) and name not in voc.OPERATORS:
            try:
                cast_type = self.parse_whole_type(name[len(voc.CONVERSION_OPERATOR_PREFIX):])
            except DemangleError:
                pass
            else:
                func.name = voc.CONVERSION_OPERATOR
                func.is_overloaded_operator = True
                func.is_type_cast = True
                func.return_type = cast_type
                return

        base_name, template = self.parse_template_name(name)

        if base_name in (voc.CONSTRUCTOR, voc.DESTRUCTOR):
            if parent is None:
                raise DemangleError('Constructor or destructor outside of a class', name)
            func.name = parent.name
            if base_name == voc.DESTRUCTOR:
                func.name = '~' + func.name
            if template is not None:
                func.templated_constructor_type = ','.join(
                    lib_render.data_type_signature(p) for p in template.parameters)

        elif base_name in voc.OPERATORS:
            func.name = voc.OPERATORS[base_name]
            func.is_overloaded_operator = True
            func.template = template

        else:
            func.name = base_name
            func.template = template


    def parse_length_prefixed(self, node: str) -> Tuple[str, str]:
        """
        "7Manager..." -> ("Manager", "...")
        """
        counter = 0
        while counter < len(node) and node[counter].isdigit():
            counter += 1
        if counter == 0:
            raise DemangleError('Expected a length-prefixed name', node)

        length = int(node[:counter])
        if length == 0 or counter + length > len(node):
            raise DemangleError('Name length out of range', node)

        return node[counter:counter + length], node[counter + length:]


    def parse_qualified_name(self, node: str) -> Tuple[List[NameSegment], str]:
        """
        Parse either a single length-prefixed name, or "Q<count>"
        followed by that many of them
        """
        if node[0] == voc.QUALIFIED_CODE:
            if len(node) < 2 or not node[1].isdigit():
                raise DemangleError('Expected a component count', node)
            count = int(node[1])
            node = node[2:]
            while node.startswith('_'):
                node = node[1:]
            if count == 0:
                raise DemangleError('Qualified name with no components', node)
        else:
            count = 1

        segments = []
        for _ in range(count):
            segment, node = self.parse_length_prefixed(node)
            segments.append(self.parse_template_name(segment))

        return segments, node


    def build_namespace(self, segments: List[NameSegment], leaf_type: Type[DemangledType]) -> DemangledType:
        """
        Link name segments into a namespace chain, returning the
        innermost one (an instance of leaf_type)
        """
        namespace = None
        for i, (name, template) in enumerate(segments):
            cls = leaf_type if i == len(segments) - 1 else DemangledType
            namespace = cls(mangled=self.mangled, name=name, namespace=namespace, template=template)
            if template is not None and isinstance(namespace, DemangledDataType):
                namespace.is_template = True
        return namespace


    def parse_template_name(self, name: str) -> NameSegment:
        """
        "Vec<f,3>" -> ("Vec", template with arguments float and 3)
        """
        if '<' not in name:
            return name, None
        if not name.endswith('>'):
            raise DemangleError('Template arguments not at end of name', name)

        base_name, _, args = name.partition('<')
        if not base_name:
            raise DemangleError('Template arguments without a name', name)

        template = DemangledTemplate()
        for arg in split_template_arguments(args[:-1]):
            template.parameters.append(self.parse_template_argument(arg))
        return base_name, template


    def parse_template_argument(self, arg: str) -> DemangledDataType:
        """
        A template argument is an integer literal, the address of a
        symbol, or a type
        """
        if LITERAL_PATTERN.fullmatch(arg):
            return DemangledDataType(mangled=self.mangled, name=arg)

        if arg.startswith('&'):
            target = arg[1:]
            if not target:
                raise DemangleError('Address of nothing', arg)
            try:
                target = lib_render.render(self.demangle_symbol(target))
            except DemangleError:
                # Plain C symbols aren't mangled at all
                if not target.isidentifier():
                    raise
            return DemangledDataType(mangled=self.mangled, name='&' + target)

        return self.parse_whole_type(arg)


    def parse_whole_type(self, node: str) -> DemangledDataType:
        """
        Parse a type that must span all of node
        """
        if not node:
            raise DemangleError('Expected a type', node)
        dt, rest = self.parse_type(node)
        if rest:
            raise DemangleError('Unexpected characters after type', rest)
        return dt


    def parse_parameters(self, node: str) -> Tuple[List[DemangledDataType], str]:
        """
        Parse function parameters until the end of input or a "_"
        introducing the return type
        """
        parameters = []
        while node and node[0] != voc.RETURN_TYPE_SEPARATOR:
            param, node = self.parse_type(node)
            parameters.append(param)
        return parameters, node


    def parse_type(self, node: str) -> Tuple[DemangledDataType, str]:
        """
        Parse one type, including all of its modifiers
        """
        if not node:
            raise DemangleError('Unexpected end of symbol', self.mangled)

        c = node[0]

        if c in voc.BUILTIN_TYPES:
            dt = DemangledDataType(mangled=self.mangled, name=voc.BUILTIN_TYPES[c])
            dt.is_varargs = dt.name == voc.VARARGS
            return dt, node[1:]

        elif c == voc.QUALIFIED_CODE or c.isdigit():
            segments, node = self.parse_qualified_name(node)
            return self.build_namespace(segments, DemangledDataType), node

        elif c == 'C' or c == 'V':
            qualifier = voc.CONST if c == 'C' else voc.VOLATILE
            # A qualifier right before "P" applies to the pointer itself
            qualifies_pointer = node[1:].lstrip('CV')[:1] == 'P'
            dt, node = self.parse_type(node[1:])
            if qualifies_pointer and isinstance(dt, FunctionIndirection) and c == 'C':
                dt.is_const_pointer = True
            elif qualifies_pointer and dt.declarator_prefix:
                dt.declarator_prefix = _join_qualifier(dt.declarator_prefix, qualifier)
            elif qualifies_pointer and dt.pointer_qualifiers:
                dt.pointer_qualifiers[-1] = _join_qualifier(dt.pointer_qualifiers[-1], qualifier)
            elif c == 'C':
                dt.is_const = True
            else:
                dt.is_volatile = True
            return dt, node

        elif c == 'P':
            dt, node = self.parse_type(node[1:])
            if isinstance(dt, FunctionIndirect):
                return self.convert(dt, FunctionPointer), node
            self.add_indirection(dt, voc.PTR_NOTATION)
            return dt, node

        elif c == 'R':
            dt, node = self.parse_type(node[1:])
            if isinstance(dt, FunctionIndirect):
                return self.convert(dt, FunctionReference), node
            elif isinstance(dt, FunctionIndirection):
                dt.modifier = voc.REF_NOTATION
            elif dt.declarator_suffix:
                self.add_indirection(dt, voc.REF_NOTATION)
            else:
                dt.is_reference = True
            return dt, node

        elif c == 'U' or c == 'S':
            fragment = node
            dt, node = self.parse_type(node[1:])
            if not dt.is_primitive or dt.is_void:
                raise DemangleError('Signedness applied to a non-integer type', fragment)
            if c == 'U':
                dt.is_unsigned = True
            else:
                dt.is_signed = True
            return dt, node

        elif c == voc.ARRAY_CODE:
            match = ARRAY_PATTERN.match(node)
            if not match:
                raise DemangleError('Malformed array size', node)
            dt, node = self.parse_type(node[match.end():])
            return self.make_array(dt, int(match.group(1))), node

        elif c == voc.MEMBER_POINTER_CODE:
            segments, node = self.parse_qualified_name(node[1:])
            class_name = lib_render.namespace_string(self.build_namespace(segments, DemangledType))
            dt, node = self.parse_type(node)
            if isinstance(dt, FunctionIndirect):
                fp = self.convert(dt, FunctionPointer)
                fp.parent_name = class_name
                return fp, node
            if dt.declarator_suffix:
                self.add_indirection(dt, class_name + voc.NAMESPACE_SEPARATOR + voc.PTR_NOTATION)
            else:
                dt.member_scope = class_name
                self.add_indirection(dt, voc.PTR_NOTATION)
            return dt, node

        elif c == voc.FUNCTION_CODE:
            return self.parse_function_type(node[1:])

        raise DemangleError('Unknown type code', node)


    def parse_function_type(self, node: str) -> Tuple[FunctionIndirect, str]:
        """
        "F<params>_<return type>", following the "F"
        """
        parameters, node = self.parse_parameters(node)
        if not node:
            raise DemangleError('Function type without a return type', self.mangled)
        return_type, node = self.parse_type(node[1:])

        func = FunctionIndirect(
            mangled=self.mangled,
            name=self.naming.next_name(),
            parameters=parameters,
            return_type=return_type,
            display_parens=False)
        return func, node


    def convert(self, fi: FunctionIndirection, cls: Type[FunctionIndirection]) -> FunctionIndirection:
        """
        Turn a bare function type into a pointer or reference to one
        """
        values = {f.name: getattr(fi, f.name) for f in dataclasses.fields(fi)}
        values['display_parens'] = True
        return cls(**values)


    def add_indirection(self, dt: DemangledDataType, glyph: str) -> None:
        """
        Apply a pointer (or a reference, or a member pointer) to dt.
        Applied to an array, it goes inside the declarator:
        "int (*)[4]", "int (&)[4]", "int (Foo::*)[4]".
        """
        if not dt.declarator_suffix:
            dt.pointer_levels += 1
            dt.pointer_qualifiers.append('')
            return

        if dt.declarator_prefix[-1:].isalpha():
            dt.declarator_prefix += voc.SPACE
        if dt.declarator_suffix.startswith('['):
            dt.declarator_prefix += '(' + glyph
            dt.declarator_suffix = ')' + dt.declarator_suffix
        else:
            dt.declarator_prefix += glyph


    def make_array(self, dt: DemangledDataType, size: int) -> DemangledDataType:
        """
        Apply an array dimension. Subscripts are listed outermost first.
        """
        subscript = f'[{size}]'

        if isinstance(dt, FunctionIndirection):
            dt.subscript = subscript + dt.subscript
        else:
            dt.declarator_suffix = subscript + dt.declarator_suffix
        dt.array_dimensions += 1
        return dt


def _join_qualifier(text: str, qualifier: str) -> str:
    if text[-1:].isalpha():
        return text + voc.SPACE + qualifier
    return text + qualifier


def decode(mangled: str) -> Union[DemangledFunction, DemangledDataType]:
    """
    Decode a CodeWarrior-mangled symbol into a demangled function or
    data type. Raises DemangleError if it can't be parsed.
    """
    if not mangled or any(c.isspace() for c in mangled):
        raise DemangleError('Not a mangled symbol', mangled)
    try:
        return _Demangler(mangled).demangle_symbol(mangled)
    except RecursionError:
        raise DemangleError('Symbol is nested too deeply', mangled[:32]) from None

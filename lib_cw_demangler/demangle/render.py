# render.py
# Turns demangled objects back into C++ declaration text


import re
from typing import List, Optional

from . import vocabulary as voc
from .objects import (
    AggregateKind,
    DemangledDataType,
    DemangledFunction,
    DemangledObject,
    DemangledTemplate,
    DemangledType,
    FunctionIndirect,
    FunctionIndirection,
    FunctionPointer,
    FunctionReference,
    Visibility,
)


ARRAY_SUBSCRIPT_PATTERN = re.compile(r'\[\d*\]')

AGGREGATE_ORDER = [
    AggregateKind.UNION,
    AggregateKind.STRUCT,
    AggregateKind.ENUM,
    AggregateKind.CLASS,
    AggregateKind.COCLASS,
    AggregateKind.COINTERFACE,
    AggregateKind.COMPLEX,
]


def render(obj: DemangledObject, pretty: bool = False) -> str:
    """
    Render any demangled object as a signature string.
    pretty puts each function parameter after the first on its own line.
    """
    if isinstance(obj, DemangledFunction):
        return function_signature(obj, pretty)
    elif isinstance(obj, DemangledDataType):
        return data_type_signature(obj)
    elif isinstance(obj, DemangledType):
        return namespace_string(obj)
    else:
        raise TypeError(f'Unable to render {type(obj).__name__}')


def plate_comment(obj: DemangledObject) -> str:
    """
    Descriptive text for the object: the compiler's own rendering if we
    have it, then the backup comment, then our pretty-printed signature
    """
    if obj.original_demangled is not None:
        return obj.original_demangled
    if obj.backup_plate_comment is not None:
        return obj.backup_plate_comment
    return render(obj, True)


def template_text(template: DemangledTemplate) -> str:
    return '<' + ','.join(data_type_signature(p) for p in template.parameters) + '>'


def namespace_name(obj: DemangledObject) -> str:
    """
    How obj is spelled when something else is nested inside of it
    """
    if isinstance(obj, DemangledFunction):
        return obj.name + parameter_string(obj.parameters)
    if isinstance(obj, DemangledType) and obj.template is not None:
        return obj.name + template_text(obj.template)
    return obj.name


def namespace_string(obj: DemangledObject) -> str:
    """
    Fully qualified name of obj, e.g. "nw4r::snd::detail"
    """
    if obj.namespace is None:
        return namespace_name(obj)
    return namespace_string(obj.namespace) + voc.NAMESPACE_SEPARATOR + namespace_name(obj)


def parameter_string(parameters: List[DemangledDataType]) -> str:
    return '(' + ','.join(data_type_signature(p) for p in parameters) + ')'


def data_type_signature(dt: DemangledDataType) -> str:
    """
    Signature of a data type. Qualifiers always come out in the same
    order, no matter which order the decoder found them in.
    """
    if isinstance(dt, FunctionIndirection):
        return to_declarator(dt, None)

    parts = []

    for kind in AGGREGATE_ORDER:
        if kind in dt.aggregate:
            parts.append(kind.keyword + voc.SPACE)
            if kind is AggregateKind.ENUM and dt.enum_type is not None and dt.enum_type != voc.DEFAULT_ENUM_TYPE:
                parts.append(dt.enum_type + voc.SPACE)

    if dt.is_signed:
        parts.append(voc.SIGNED + voc.SPACE)
    if dt.is_unsigned:
        parts.append(voc.UNSIGNED + voc.SPACE)

    if dt.namespace is not None:
        parts.append(namespace_string(dt.namespace) + voc.NAMESPACE_SEPARATOR)

    parts.append(dt.name)

    if dt.template is not None:
        parts.append(template_text(dt.template))

    if dt.is_const:
        parts.append(voc.SPACE + voc.CONST)
    if dt.is_volatile:
        parts.append(voc.SPACE + voc.VOLATILE)
    if dt.based_name is not None:
        parts.append(voc.SPACE + dt.based_name)
    if dt.member_scope:
        parts.append(voc.SPACE + dt.member_scope + voc.NAMESPACE_SEPARATOR)
    if dt.is_unaligned:
        parts.append(voc.SPACE + voc.UNALIGNED)

    if dt.pointer_levels >= 1:
        parts.append(voc.SPACE + voc.PTR_NOTATION + _pointer_qualifier(dt, 0))

    if dt.is_reference:
        parts.append(voc.SPACE + voc.REF_NOTATION)
        if dt.is_rvalue_reference:
            parts.append(voc.REF_NOTATION)

    # Real compiler output doesn't settle the order of these two; this
    # is the order we've always used
    if dt.is_pointer64:
        parts.append(voc.SPACE + voc.PTR64)
    if dt.is_restrict:
        parts.append(voc.SPACE + voc.RESTRICT)

    for level in range(1, dt.pointer_levels):
        parts.append(voc.SPACE + voc.PTR_NOTATION + _pointer_qualifier(dt, level))

    if dt.declarator_prefix or dt.declarator_suffix:
        if dt.declarator_prefix and not parts[-1].endswith((voc.PTR_NOTATION, voc.REF_NOTATION)):
            parts.append(voc.SPACE)
        parts.append(dt.declarator_prefix + dt.declarator_suffix)
    # Only add subscripts if they aren't already in the name
    elif dt.is_array and not ARRAY_SUBSCRIPT_PATTERN.search(dt.name):
        parts.append(voc.ARR_NOTATION * dt.array_dimensions)

    return ''.join(parts)


def _pointer_qualifier(dt: DemangledDataType, level: int) -> str:
    if level < len(dt.pointer_qualifiers):
        return dt.pointer_qualifiers[level]
    return ''


def _append_qualifier(buffer: str, qualifier: str) -> str:
    """
    Append a trailing qualifier, with a separating space unless the
    buffer is (nearly) empty
    """
    if len(buffer) > 2:
        buffer += voc.SPACE
    return buffer + qualifier


def _parent_name_prefix(fi: FunctionIndirection, buffer: str) -> str:
    if fi.parent_name is None or fi.parent_name.startswith(voc.DEFAULT_NAME_PREFIX):
        return buffer
    if len(buffer) > 2 and buffer[-1] != voc.SPACE:
        buffer += voc.SPACE
    return buffer + fi.parent_name + voc.NAMESPACE_SEPARATOR


def _add_modifier(fi: FunctionIndirection, buffer: str) -> str:
    if not fi.modifier:
        return buffer
    # The modifier is frequently the same glyph the pointer levels
    # already printed
    if fi.modifier == fi.TYPE_STRING and fi.pointer_levels > 0:
        return buffer
    if len(buffer) > 2:
        buffer += voc.SPACE
    return buffer + fi.modifier


def _convention_pointer_name(fi: FunctionIndirection, name: Optional[str]) -> str:
    """
    The part of a function declarator that goes between the parentheses,
    e.g. "Class::*const name"
    """
    buffer = fi.calling_convention or ''

    type_buffer = ''
    if fi.pointer_levels > 0:
        type_buffer = _parent_name_prefix(fi, type_buffer)
        type_buffer += fi.TYPE_STRING * fi.pointer_levels

    if type_buffer:
        if fi.calling_convention:
            buffer += voc.SPACE
        buffer += type_buffer

    buffer = _add_modifier(fi, buffer)

    if fi.is_const_pointer:
        buffer += voc.CONST

    if fi.is_pointer64:
        buffer = _append_qualifier(buffer, voc.PTR64)

    if name is not None:
        if len(buffer) > 2 and buffer[-1] != voc.SPACE:
            buffer += voc.SPACE
        buffer += name

    return buffer


def to_declarator(fi: FunctionIndirection, name: Optional[str]) -> str:
    """
    Compose the declarator for a pointer/reference to function, with
    name (which may itself be a whole declarator) in the middle. A
    return type that's another function indirection wraps the result
    again, so "pointer to function returning pointer to function" comes
    out as "void (*(*name)(int))(void)".
    """
    inner = _convention_pointer_name(fi, name) + fi.subscript
    if fi.display_parens:
        declarator = f'({inner})'
    else:
        declarator = inner
    declarator += parameter_string(fi.parameters)

    return_type = fi.return_type
    if isinstance(return_type, (FunctionPointer, FunctionReference, FunctionIndirect)):
        buffer = to_declarator(return_type, declarator)
    elif isinstance(return_type, DemangledDataType):
        buffer = data_type_signature(return_type) + voc.SPACE + declarator
    elif return_type is None:
        buffer = declarator
    else:
        raise TypeError(f'Unexpected return type {type(return_type).__name__}')

    if fi.is_const:
        buffer = _append_qualifier(buffer, voc.CONST)
    if fi.is_volatile:
        buffer = _append_qualifier(buffer, voc.VOLATILE)
    if fi.is_trailing_unaligned:
        buffer = _append_qualifier(buffer, voc.UNALIGNED)
    if fi.is_trailing_pointer64:
        buffer = _append_qualifier(buffer, voc.PTR64)
    if fi.is_trailing_restrict:
        buffer = _append_qualifier(buffer, voc.RESTRICT)

    return buffer


def _markers(func: DemangledFunction, *, thunk: bool, static: bool) -> str:
    """
    Special prefix, thunk marker, visibility and storage keywords that
    go in front of a function signature
    """
    buffer = ''
    if func.special_prefix is not None:
        buffer += func.special_prefix + voc.SPACE
    if thunk and func.is_thunk:
        buffer += voc.THUNK
    if func.visibility is not None and func.visibility is not Visibility.GLOBAL:
        buffer += func.visibility.value + voc.SPACE
    if func.is_virtual:
        buffer += voc.VIRTUAL + voc.SPACE
    if static and func.is_static:
        buffer += voc.STATIC + voc.SPACE
    return buffer


def _add_parameters(buffer: str, parameters: List[DemangledDataType], pretty: bool) -> str:
    buffer += '('
    pad = voc.SPACE * len(buffer) if pretty else ''

    if not parameters:
        buffer += voc.VOID

    for i, param in enumerate(parameters):
        if i:
            buffer += ','
            if pretty:
                buffer += '\n'
            buffer += pad
        buffer += data_type_signature(param)

    return buffer + ')'


def function_signature(func: DemangledFunction, pretty: bool = False) -> str:
    """
    Signature of a function symbol, such as
    "nw4r::snd::detail::AxfxImpl::HookAlloc(void * (**)(unsigned long),void (**)(void *))"
    """
    return_type = func.return_type
    returns_function = isinstance(return_type, FunctionIndirection)

    buffer = ''
    if not returns_function:
        buffer += _markers(func, thunk=True, static=True)
        if not func.is_type_cast and return_type is not None:
            buffer += data_type_signature(return_type) + voc.SPACE

    if func.calling_convention is not None:
        buffer += func.calling_convention + voc.SPACE

    if func.namespace is not None:
        buffer += namespace_string(func.namespace) + voc.NAMESPACE_SEPARATOR

    buffer += func.name

    if func.is_type_cast and return_type is not None:
        buffer += voc.SPACE + data_type_signature(return_type) + voc.SPACE

    if func.template is not None:
        buffer += template_text(func.template)

    if func.templated_constructor_type is not None:
        buffer += f'<{func.templated_constructor_type}>'

    buffer = _add_parameters(buffer, func.parameters, pretty)

    if func.storage_class is not None:
        buffer += voc.SPACE + func.storage_class

    if returns_function:
        buffer = _markers(func, thunk=False, static=False) + to_declarator(return_type, buffer)

    if func.is_trailing_const:
        buffer = _append_qualifier(buffer, voc.CONST)
    if func.is_trailing_volatile:
        buffer = _append_qualifier(buffer, voc.VOLATILE)
    if func.is_trailing_unaligned:
        buffer = _append_qualifier(buffer, voc.UNALIGNED)
    if func.is_trailing_pointer64:
        buffer = _append_qualifier(buffer, voc.PTR64)
    if func.is_trailing_restrict:
        buffer = _append_qualifier(buffer, voc.RESTRICT)
    if func.throw_attribute is not None:
        buffer = _append_qualifier(buffer, func.throw_attribute)

    return buffer

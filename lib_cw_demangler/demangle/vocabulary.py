# vocabulary.py
# Fixed names and tokens shared by the CodeWarrior decoder and renderer


SPACE = ' '
NAMESPACE_SEPARATOR = '::'

ARR_NOTATION = '[]'
REF_NOTATION = '&'
PTR_NOTATION = '*'

UNSIGNED = 'unsigned'
SIGNED = 'signed'

CONST = 'const'
VOLATILE = 'volatile'
PTR64 = '__ptr64'
UNALIGNED = '__unaligned'
RESTRICT = '__restrict'

VIRTUAL = 'virtual'
STATIC = 'static'
THUNK = '[thunk]:'

UNION = 'union'
STRUCT = 'struct'
ENUM = 'enum'
CLASS = 'class'
COCLASS = 'coclass'
COINTERFACE = 'cointerface'
COMPLEX = 'complex'

# An enum with this storage type doesn't get it spelled out
DEFAULT_ENUM_TYPE = 'int'

VARARGS = '...'
VOID = 'void'
BOOL = 'bool'
CHAR = 'char'
WCHAR_T = 'wchar_t'
SHORT = 'short'
INT = 'int'
LONG = 'long'
LONG_LONG = 'long long'
FLOAT = 'float'
DOUBLE = 'double'
INT128 = '__int128'
FLOAT128 = '__float128'
LONG_DOUBLE = 'long double'

PRIMITIVES = frozenset({
    VOID,
    BOOL,
    CHAR,
    WCHAR_T,
    SHORT,
    INT,
    INT128,
    LONG,
    LONG_LONG,
    FLOAT,
    DOUBLE,
    FLOAT128,
    LONG_DOUBLE,
})

# Placeholder name given to function pointers, references and bare
# function types that don't have a name of their own
DEFAULT_NAME_PREFIX = 'FuncDef'


# Single-character type codes
BUILTIN_TYPES = {
    'v': VOID,
    'b': BOOL,
    'c': CHAR,
    'w': WCHAR_T,
    's': SHORT,
    'i': INT,
    'l': LONG,
    'x': LONG_LONG,
    'f': FLOAT,
    'd': DOUBLE,
    'r': LONG_DOUBLE,
    'e': VARARGS,
}

# Codes that qualify the type that follows them
MODIFIER_CODES = {
    'C': CONST,
    'V': VOLATILE,
    'P': PTR_NOTATION,
    'R': REF_NOTATION,
    'U': UNSIGNED,
    'S': SIGNED,
}

FUNCTION_CODE = 'F'
ARRAY_CODE = 'A'
MEMBER_POINTER_CODE = 'M'
QUALIFIED_CODE = 'Q'
RETURN_TYPE_SEPARATOR = '_'

# Characters that may follow the "__" separating a name from its type
SEPARATOR_FOLLOWERS = frozenset('CFQ0123456789')


CONSTRUCTOR = '__ct'
DESTRUCTOR = '__dt'
CONVERSION_OPERATOR_PREFIX = '__op'
VIRTUAL_TABLE = '__vt'
VIRTUAL_TABLE_SUFFIX = ' virtual table'

OPERATORS = {
    '__nw': 'operator new',
    '__nwa': 'operator new[]',
    '__dl': 'operator delete',
    '__dla': 'operator delete[]',
    '__pl': 'operator+',
    '__mi': 'operator-',
    '__ml': 'operator*',
    '__dv': 'operator/',
    '__md': 'operator%',
    '__er': 'operator^',
    '__ad': 'operator&',
    '__or': 'operator|',
    '__co': 'operator~',
    '__nt': 'operator!',
    '__as': 'operator=',
    '__lt': 'operator<',
    '__gt': 'operator>',
    '__apl': 'operator+=',
    '__ami': 'operator-=',
    '__amu': 'operator*=',
    '__adv': 'operator/=',
    '__amd': 'operator%=',
    '__aer': 'operator^=',
    '__aad': 'operator&=',
    '__aor': 'operator|=',
    '__ls': 'operator<<',
    '__rs': 'operator>>',
    '__ars': 'operator>>=',
    '__als': 'operator<<=',
    '__eq': 'operator==',
    '__ne': 'operator!=',
    '__le': 'operator<=',
    '__ge': 'operator>=',
    '__aa': 'operator&&',
    '__oo': 'operator||',
    '__pp': 'operator++',
    '__mm': 'operator--',
    '__cm': 'operator,',
    '__rm': 'operator->*',
    '__rf': 'operator->',
    '__cl': 'operator()',
    '__vc': 'operator[]',
}

CONVERSION_OPERATOR = 'operator'


# Symbol prefixes for function-scoped statics
LOCAL_PREFIX = '@LOCAL@'
GUARD_PREFIX = '@GUARD@'
GUARD_SUFFIX = ' guard variable'

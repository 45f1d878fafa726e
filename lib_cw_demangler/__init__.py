from .demangle import DemangleResult, decode, decode_and_render, demangle, demangle_all, render
from .errors import DemangleError

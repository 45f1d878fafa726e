from typing import Iterable, List, NamedTuple, Union

from ..errors import DemangleError
from . import decoder as lib_decoder
from . import render as lib_render
from .objects import DemangledDataType, DemangledFunction, DemangledObject


class DemangleResult(NamedTuple):
    """
    Outcome of demangling one symbol. If it couldn't be demangled,
    signature is the symbol itself and succeeded is False.
    """
    signature: str
    succeeded: bool


def decode(sym: str) -> Union[DemangledFunction, DemangledDataType]:
    """
    Decode a symbol into demangled objects. Raises DemangleError if the
    symbol isn't a valid CodeWarrior-mangled name.
    """
    return lib_decoder.decode(sym)


def render(obj: DemangledObject, pretty: bool = False) -> str:
    """
    Render demangled objects as a signature
    """
    return lib_render.render(obj, pretty)


def decode_and_render(sym: str, pretty: bool = False) -> DemangleResult:
    """
    Demangle a symbol, falling back to the symbol itself if it can't be
    decoded
    """
    try:
        signature = lib_render.render(lib_decoder.decode(sym), pretty)
    except DemangleError:
        signature = sym
    return DemangleResult(signature, signature != sym)


def demangle(sym: str, *, pretty: bool = False) -> str:
    """
    Demangle a symbol, or return it unchanged if that isn't possible
    """
    return decode_and_render(sym, pretty).signature


def demangle_all(symbols: Iterable[str], *, pretty: bool = False) -> List[DemangleResult]:
    """
    Demangle many symbols. Results are in the same order as the input.
    """
    return [decode_and_render(sym, pretty) for sym in symbols]

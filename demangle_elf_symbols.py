#!/usr/bin/env python3

import argparse
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple

from elftools.elf.elffile import ELFFile  # pip install pyelftools
from elftools.elf.sections import SymbolTableSection

import lib_cw_demangler


def iter_elf_symbols(file: BinaryIO) -> Iterator[Tuple[int, str]]:
    """
    Yield (address, name) for every named symbol in the file's symbol
    tables (.symtab and .dynsym)
    """
    elf = ELFFile(file)
    for section in elf.iter_sections():
        if not isinstance(section, SymbolTableSection):
            continue
        for symbol in section.iter_symbols():
            if symbol.name:
                yield symbol['st_value'], symbol.name


def demangled_symbol_lines(symbols: Iterable[Tuple[int, str]], *, pretty: bool = False, include_all: bool = False) -> Iterator[str]:
    """
    Produce "address name -> signature" lines. Symbols that can't be
    demangled are skipped unless include_all is set.
    """
    for address, name in symbols:
        result = lib_cw_demangler.decode_and_render(name, pretty)
        if result.succeeded or include_all:
            yield f'{address:08x} {name} -> {result.signature}'


def main(args: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description='Demangle the symbols in an ELF file (.o, .elf) built with CodeWarrior.')

    parser.add_argument('elf_file', type=Path,
        help='ELF file to read')
    parser.add_argument('--pretty', action='store_true',
        help='put each function parameter on its own line')
    parser.add_argument('--all', action='store_true',
        help="also list symbols that aren't mangled")

    parsed_args = parser.parse_args(args)

    with parsed_args.elf_file.open('rb') as f:
        for line in demangled_symbol_lines(iter_elf_symbols(f), pretty=parsed_args.pretty, include_all=parsed_args.all):
            print(line)


if __name__ == '__main__':
    main()

#!/usr/bin/env python3

import argparse
import sys
from typing import List, Optional

import lib_cw_demangler
from lib_cw_demangler import common


def demangle_symbols(symbols: List[str], *, pretty: bool = False, errors: common.ErrorVolume = common.ErrorVolume.default()) -> None:
    """
    Demangle each symbol and print one line per symbol to stdout.
    Symbols that can't be demangled are printed unchanged, and
    complained about on stderr.
    """
    for sym, result in zip(symbols, lib_cw_demangler.demangle_all(symbols, pretty=pretty)):
        if not result.succeeded:
            errors.report(f'Unable to demangle "{sym}"', sys.stderr)
        print(result.signature)


def main(args: Optional[List[str]] = None) -> None:
    """
    Main function
    """
    parser = argparse.ArgumentParser(
        description='Demangle CodeWarrior symbols.')

    parser.add_argument('symbol', nargs='+',
        help="the mangled symbol(s). It's a good idea to surround them in quotes (preferably single-quotes) so the shell doesn't eat special characters.")
    parser.add_argument('--pretty', action='store_true',
        help='put each function parameter on its own line')
    parser.add_argument('--errors', choices=[v.value for v in common.ErrorVolume], default=common.ErrorVolume.default().value,
        help='how loudly to complain about symbols that can\'t be demangled (default: %(default)s)')

    parsed_args = parser.parse_args(args)

    demangle_symbols(
        parsed_args.symbol,
        pretty=parsed_args.pretty,
        errors=common.ErrorVolume(parsed_args.errors))


if __name__ == '__main__':
    main()

"""Command line driver: reduce a DIMACS file to 3-occurrence normal form.

Usage:
  sat3occ <input.cnf> <output.cnf>
  python -m sat3occ.src.cli <input.cnf> <output.cnf> --strict true --verbose true
"""
import logging
import sys

from jsonargparse import CLI

from sat3occ.src.data_utils import reduce_file
from sat3occ.src.dimacs import FormatError


def reduce(
    input_path: str, output_path: str, strict: bool = False, verbose: bool = False
):
    """Reduce a CNF formula so that every variable occurs at most three times.

    The result is equisatisfiable with the input. The output file is only
    created once the whole formula has been transformed and written.

    Args:
        input_path: DIMACS CNF file to read (.cnf or .cnf.gz)
        output_path: file the reduced formula is written to
        strict: reject inputs whose header counts do not match their clauses
        verbose: log progress messages
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    reduce_file(input_path, output_path, strict=strict)


def main(args=None):
    """Entry point of the sat3occ console script."""
    try:
        CLI(reduce, args=args)
    except (FormatError, OSError) as error:
        sys.exit(f"sat3occ: {error}")


if __name__ == "__main__":
    main()

"""Reading and writing formulas in the DIMACS CNF exchange format.

    c optional comment lines
    p cnf <max_variable> <clause_count>
    <lit_1> <lit_2> ... <lit_n> 0
    ...

Each clause sits on its own line and is terminated by 0. Tokens after the
terminator are ignored, a line that ends before reaching 0 yields no clause.
The numbers on the header line are informational unless `strict` is set.
"""
import gzip

import numpy as np

from sat3occ.src.clause_store import CSRFormula, LITERAL_DTYPE

HEADER_TAG = "p cnf"
MAX_LITERAL = int(np.iinfo(LITERAL_DTYPE).max)


class FormatError(ValueError):
    """Raised when input text is not a well-formed DIMACS CNF formula."""


def _parse_clause_line(line, line_number):
    """Return the clause on one line, or None if the line holds no terminated clause."""
    clause = []
    for token in line.split():
        try:
            literal = int(token)
        except ValueError:
            raise FormatError(
                f"line {line_number}: expected an integer literal, got {token!r}"
            ) from None
        if abs(literal) > MAX_LITERAL:
            raise FormatError(f"line {line_number}: literal {token!r} out of range")
        if literal == 0:
            if not clause:
                raise FormatError(f"line {line_number}: empty clause")
            return clause
        clause.append(literal)
    return None


def _declared_counts(header, line_number):
    """Return the variable and clause counts of a header line."""
    fields = header[header.index(HEADER_TAG) + len(HEADER_TAG) :].split()
    try:
        n_variables, n_clauses = (int(f) for f in fields[:2])
    except ValueError:
        raise FormatError(
            f"line {line_number}: malformed header {header.strip()!r}"
        ) from None
    return n_variables, n_clauses


def _check_header(header, line_number, formula: CSRFormula):
    """Compare the header counts with the parsed formula (strict mode only)."""
    n_variables, n_clauses = _declared_counts(header, line_number)
    if n_clauses != formula.clause_count():
        raise FormatError(
            f"header declares {n_clauses} clauses, found {formula.clause_count()}"
        )
    if n_variables < formula.max_variable():
        raise FormatError(
            f"header declares {n_variables} variables, "
            f"found variable {formula.max_variable()}"
        )


def parse_dimacs(lines, strict=False):
    """Parse DIMACS text into a CSRFormula.

    Args:
        lines (iterable): lines of text, e.g. an open file
        strict (bool, optional): reject headers whose counts do not match the
            parsed clauses. Defaults to False.

    Raises:
        FormatError: if the first non-comment line has no "p cnf" header, a
            literal is not an integer, a clause is empty, or (strict only) the
            header does not match the content

    Returns:
        CSRFormula: clauses in file order, literals in token order
    """
    formula = CSRFormula()
    header = None
    header_line = 0
    for line_number, line in enumerate(lines, start=1):
        if header is None:
            if line.startswith("c") or not line.strip():
                continue
            if HEADER_TAG not in line:
                raise FormatError(
                    f"line {line_number}: not in exchange format, "
                    f"expected '{HEADER_TAG}' header, got {line.strip()!r}"
                )
            header, header_line = line, line_number
            continue
        if line.startswith("c"):
            continue
        # SATLIB files end with a '%' line followed by a stray 0
        if line.startswith("%"):
            break
        clause = _parse_clause_line(line, line_number)
        if clause is not None:
            formula.append_clause(clause)

    if header is None:
        raise FormatError(f"not in exchange format, missing '{HEADER_TAG}' header")
    if strict:
        _check_header(header, header_line, formula)
    return formula


def from_string(text, strict=False):
    """Parse a formula from DIMACS text."""
    return parse_dimacs(text.splitlines(), strict=strict)


def _open(path, mode):
    """Open a plain or gzip compressed file in text mode."""
    if str(path).endswith(".gz"):
        return gzip.open(path, mode)
    return open(path, mode)


def read_dimacs(path, strict=False):
    """Read a formula from a .cnf or gzip compressed .cnf.gz file."""
    with _open(path, "rt") as file:
        return parse_dimacs(file, strict=strict)


def write_dimacs(formula: CSRFormula, stream):
    """Write the formula to a text stream, header first.

    The header reports the current maximum variable and clause count.
    """
    stream.write(f"{HEADER_TAG} {formula.max_variable()} {formula.clause_count()}\n")
    for clause in formula:
        stream.write(" ".join(str(literal) for literal in clause.tolist()) + " 0\n")


def to_dimacs(formula: CSRFormula):
    """Return the DIMACS text of a formula."""
    lines = [f"{HEADER_TAG} {formula.max_variable()} {formula.clause_count()}"]
    for clause in formula:
        lines.append(" ".join(str(literal) for literal in clause.tolist()) + " 0")
    return "\n".join(lines) + "\n"


def save_dimacs(formula: CSRFormula, path):
    """Write the formula to a .cnf or .cnf.gz file."""
    with _open(path, "wt") as file:
        write_dimacs(formula, file)

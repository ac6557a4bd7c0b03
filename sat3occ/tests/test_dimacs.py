"""Test parsing and serialization of DIMACS CNF text."""
import io
import os
import pytest
from sat3occ.src.clause_store import CSRFormula
from sat3occ.src.dimacs import (
    FormatError,
    from_string,
    parse_dimacs,
    read_dimacs,
    save_dimacs,
    to_dimacs,
    write_dimacs,
)
from sat3occ.src.gadget import to_3_occurrence


INSTANCES = os.path.join(os.path.dirname(__file__), "test_instances")


def test_parse_simple_formula():
    """Test clauses and literal order of a plain instance."""
    formula = from_string("p cnf 3 2 \n 1 2 0 \n 3 0")
    assert formula.to_clauses() == [[1, 2], [3]]
    assert formula.max_variable() == 3


def test_missing_header_is_rejected():
    """Test that the first non-comment line must carry the header."""
    with pytest.raises(FormatError, match="not in exchange format"):
        from_string("1 2 0\n3 0\n")


def test_empty_input_is_rejected():
    """Test that an input without any header is rejected."""
    with pytest.raises(FormatError, match="not in exchange format"):
        from_string("c only a comment\n")


def test_leading_comments_are_skipped():
    """Test comments before the header, even ones that look like a header."""
    formula = from_string("c p cnf 99 99\nc\np cnf 2 1\n1 -2 0\n")
    assert formula.to_clauses() == [[1, -2]]


def test_comments_after_header_are_skipped():
    """Test that comment lines after the header are not interpreted."""
    formula = from_string("p cnf 2 2\n1 0\nc 5 6 0\nc p cnf 1 1\n-2 0\n")
    assert formula.to_clauses() == [[1], [-2]]


def test_header_counts_are_informational():
    """Test that header numbers are not checked by default."""
    formula = from_string("p cnf 1 7\n1 2 3 0\n")
    assert formula.clause_count() == 1
    assert formula.max_variable() == 3


def test_tokens_after_terminator_are_ignored():
    """Test that only the first clause on a line is read."""
    formula = from_string("p cnf 4 1\n1 2 0 3 4 0\n5 0 not-a-number\n")
    assert formula.to_clauses() == [[1, 2], [5]]


def test_unterminated_line_emits_no_clause():
    """Test that a clause does not continue onto the next line."""
    formula = from_string("p cnf 3 1\n1 2\n3 0\n")
    assert formula.to_clauses() == [[3]]


def test_blank_lines_are_ignored():
    """Test blank lines before and after the header."""
    formula = from_string("\n\np cnf 2 2\n\n1 0\n   \n2 0\n")
    assert formula.to_clauses() == [[1], [2]]


@pytest.mark.parametrize(
    "line",
    [
        "1 x 0",
        "1.5 0",
        "- 0",
        "1 2 three 0",
        "99999999999999999999 0",
        "1 -9223372036854775808 0",
    ],
)
def test_malformed_literal_is_rejected(line):
    """Test that non-integer and out of range tokens fail loudly."""
    with pytest.raises(FormatError, match="line 2"):
        from_string("p cnf 3 1\n" + line + "\n")


def test_empty_clause_is_rejected():
    """Test that a bare terminator is a format error."""
    with pytest.raises(FormatError, match="empty clause"):
        from_string("p cnf 1 2\n1 0\n0\n")


def test_satlib_trailer():
    """Test that a '%' line ends the formula."""
    formula = read_dimacs(os.path.join(INSTANCES, "satlib_trailer.cnf"))
    assert formula.clause_count() == 6
    assert formula.clause(0).tolist() == [1, -2, 3]
    assert formula.clause(5).tolist() == [1, -4, 2]


def test_strict_header():
    """Test the optional header validation."""
    assert from_string("p cnf 3 1\n1 2 0\n", strict=True).clause_count() == 1
    with pytest.raises(FormatError, match="clauses"):
        from_string("p cnf 2 2\n1 2 0\n", strict=True)
    with pytest.raises(FormatError, match="variables"):
        from_string("p cnf 1 1\n1 2 0\n", strict=True)
    with pytest.raises(FormatError, match="malformed header"):
        from_string("p cnf x y\n1 2 0\n", strict=True)


def test_parse_from_stream():
    """Test parsing an open text stream."""
    stream = io.StringIO("p cnf 2 2\n1 2 0\n-1 0\n")
    assert parse_dimacs(stream).to_clauses() == [[1, 2], [-1]]


def test_serialize():
    """Test the header and clause lines of the output."""
    formula = CSRFormula.from_clauses([[1, -2], [3]])
    assert to_dimacs(formula) == "p cnf 3 2\n1 -2 0\n3 0\n"


def test_serialize_empty_formula():
    """Test the output of a formula without clauses."""
    assert to_dimacs(CSRFormula()) == "p cnf 0 0\n"
    assert from_string(to_dimacs(CSRFormula())).clause_count() == 0


def test_write_dimacs_matches_to_dimacs():
    """Test that streaming output equals the string output."""
    formula = CSRFormula.from_clauses([[1, -2, 5], [3], [-4, 1]])
    stream = io.StringIO()
    write_dimacs(formula, stream)
    assert stream.getvalue() == to_dimacs(formula)


def test_header_reports_current_state():
    """Test that the header reflects clauses and variables added by the transform."""
    formula = read_dimacs(os.path.join(INSTANCES, "four_occurrences.cnf"))
    to_3_occurrence(formula)
    header = to_dimacs(formula).splitlines()[0]
    assert header == "p cnf 4 8"


def test_round_trip_of_transformed_formula():
    """Test parse(serialize(store)) on transform output."""
    formula = read_dimacs(os.path.join(INSTANCES, "satlib_trailer.cnf"))
    to_3_occurrence(formula)
    parsed = from_string(to_dimacs(formula))
    assert parsed == formula
    assert parsed.max_variable() == formula.max_variable()
    assert parsed.clause_count() == formula.clause_count()


@pytest.mark.parametrize("name", ["plain.cnf", "compressed.cnf.gz"])
def test_save_and_read_file(tmp_path, name):
    """Test writing and reading plain and gzip compressed files."""
    formula = CSRFormula.from_clauses([[1, 2], [-2, 3], [-3]])
    path = str(tmp_path / name)
    save_dimacs(formula, path)
    assert read_dimacs(path) == formula


def test_largest_literal_is_accepted():
    """Test that literals up to the int64 maximum are stored unchanged."""
    formula = from_string("p cnf 9223372036854775807 1\n-9223372036854775807 0\n")
    assert formula.to_clauses() == [[-9223372036854775807]]

"""CSR storage for CNF formulas.

All literals of a formula live in one flat integer array. A second array holds,
for every clause, the end offset of its literal run, so clause ``i`` is
``literals[offsets[i - 1]:offsets[i]]`` with ``offsets[-1] := 0``. Both arrays
are numpy buffers grown by doubling their capacity.
"""
import numpy as np
from pysat.formula import CNF

from sat3occ.src.literals import check_literal

LITERAL_DTYPE = np.int64
INITIAL_CAPACITY = 16


def _ensure_capacity(buffer, required):
    """Return buffer, or a copy of it with at least `required` slots."""
    if required <= len(buffer):
        return buffer
    capacity = max(2 * len(buffer), required, INITIAL_CAPACITY)
    grown = np.zeros(capacity, dtype=buffer.dtype)
    grown[: len(buffer)] = buffer
    return grown


class CSRFormula:
    """A CNF formula stored as a flattened literal array plus clause end offsets.

    Clauses can only be appended, never deleted. Literals can be rewritten in
    place through `rewrite`, which is what the 3-occurrence transform does
    when it renames occurrences to fresh variables.

    Invariants:
        * offsets are strictly increasing (no empty clause), starting implicitly at 0
        * there is one offset per clause
        * the number of literals equals the last offset
        * no stored literal is 0
    """

    def __init__(self, capacity=INITIAL_CAPACITY):
        """Create an empty formula."""
        self._literals = np.zeros(capacity, dtype=LITERAL_DTYPE)
        self._offsets = np.zeros(capacity, dtype=LITERAL_DTYPE)
        self._n_literals = 0
        self._n_clauses = 0

    @classmethod
    def from_clauses(cls, clauses):
        """Build a formula from an iterable of literal sequences.

        Args:
            clauses (iterable): clauses given as sequences of non-zero ints

        Returns:
            CSRFormula: formula holding the clauses in the given order
        """
        formula = cls()
        for clause in clauses:
            formula.append_clause(clause)
        return formula

    @classmethod
    def from_pysat(cls, cnf: CNF):
        """Build a formula from a pysat CNF object."""
        return cls.from_clauses(cnf.clauses)

    def append_clause(self, literals):
        """Append one clause at the end of the formula.

        Args:
            literals (iterable): non-zero signed integers

        Raises:
            ValueError: if the clause is empty or contains the literal 0

        Returns:
            int: index of the appended clause
        """
        clause = [check_literal(literal) for literal in literals]
        if not clause:
            raise ValueError("empty clauses cannot be stored")
        end = self._n_literals + len(clause)
        self._literals = _ensure_capacity(self._literals, end)
        self._offsets = _ensure_capacity(self._offsets, self._n_clauses + 1)
        self._literals[self._n_literals : end] = clause
        self._offsets[self._n_clauses] = end
        self._n_literals = end
        self._n_clauses += 1
        return self._n_clauses - 1

    def append_clauses(self, clauses):
        """Append every clause of an iterable."""
        for clause in clauses:
            self.append_clause(clause)

    def clause_count(self):
        """Get number of clauses."""
        return self._n_clauses

    def literal_count(self):
        """Get number of stored literals."""
        return self._n_literals

    def max_variable(self):
        """Return the largest variable referenced by any literal, 0 if there is none.

        This scans every literal; the value is not cached because the transform
        keeps introducing new variables.
        """
        if self._n_literals == 0:
            return 0
        return int(np.abs(self.literals).max())

    @property
    def literals(self):
        """Live view of the stored literals (writes go straight into the formula)."""
        return self._literals[: self._n_literals]

    @property
    def offsets(self):
        """Read-only view of the clause end offsets."""
        view = self._offsets[: self._n_clauses]
        view.flags.writeable = False
        return view

    def clause_bounds(self, index):
        """Return the half-open range [start, end) of clause `index` in `literals`."""
        if not 0 <= index < self._n_clauses:
            raise IndexError(f"clause index {index} out of range")
        start = int(self._offsets[index - 1]) if index > 0 else 0
        return start, int(self._offsets[index])

    def clause(self, index):
        """Return the literal run of clause `index` as an array view."""
        start, end = self.clause_bounds(index)
        return self.literals[start:end]

    def clause_lengths(self):
        """Return the number of literals of every clause."""
        return np.diff(self.offsets, prepend=0)

    def rewrite(self, positions, literals):
        """Overwrite the literals stored at `positions` (indices into `literals`)."""
        positions = np.asarray(positions, dtype=np.intp)
        literals = np.asarray(literals, dtype=LITERAL_DTYPE)
        if np.any(literals == 0):
            raise ValueError("literal 0 is reserved as the clause terminator")
        out_of_range = (positions < 0) | (positions >= self._n_literals)
        if np.any(out_of_range):
            raise IndexError("literal position out of range")
        self._literals[positions] = literals

    def check_invariants(self):
        """Assert the structural invariants of the CSR layout."""
        offsets = self.offsets
        assert len(offsets) == self._n_clauses
        if self._n_clauses:
            assert offsets[0] > 0
            assert np.all(np.diff(offsets) > 0)
            assert offsets[-1] == self._n_literals
        else:
            assert self._n_literals == 0
        assert not np.any(self.literals == 0)

    def copy(self):
        """Return an independent copy of the formula."""
        other = CSRFormula(capacity=max(len(self._literals), len(self._offsets)))
        other._literals[: self._n_literals] = self.literals
        other._offsets[: self._n_clauses] = self.offsets
        other._n_literals = self._n_literals
        other._n_clauses = self._n_clauses
        return other

    def to_clauses(self):
        """Return the clauses as a list of lists of python ints."""
        return [clause.tolist() for clause in self]

    def to_pysat(self):
        """Return the formula as a pysat CNF object."""
        return CNF(from_clauses=self.to_clauses())

    def __len__(self):
        """Get number of clauses."""
        return self._n_clauses

    def __iter__(self):
        """Iterate over the clauses as array views."""
        start = 0
        for end in self.offsets.tolist():
            yield self._literals[start:end]
            start = end

    def __eq__(self, other):
        """Compare clause structure and literals."""
        if not isinstance(other, CSRFormula):
            return NotImplemented
        return np.array_equal(self.offsets, other.offsets) and np.array_equal(
            self.literals, other.literals
        )

    def __repr__(self):
        """Summarize the formula size."""
        return (
            f"CSRFormula(clauses={self._n_clauses}, literals={self._n_literals}, "
            f"max_variable={self.max_variable()})"
        )

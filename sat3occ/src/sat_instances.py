"""File containing useful functions to evaluate assignments on formulas and to map models between a formula and its 3-occurrence reduction."""
import collections
import numpy as np
from pysat.solvers import Glucose3
from sat3occ.src.clause_store import CSRFormula
from sat3occ.src.gadget import Reduction
from sat3occ.src.occurrences import max_occurrence

MAX_BRUTE_FORCE_VARIABLES = 20

FormulaStats = collections.namedtuple(
    "FormulaStats", ("n_variables", "n_clauses", "n_literals", "k", "max_occurrence")
)


def formula_stats(formula: CSRFormula) -> FormulaStats:
    """Return size parameters of a formula (k is the longest clause length)."""
    lengths = formula.clause_lengths()
    return FormulaStats(
        n_variables=formula.max_variable(),
        n_clauses=formula.clause_count(),
        n_literals=formula.literal_count(),
        k=int(lengths.max()) if len(lengths) else 0,
        max_occurrence=max_occurrence(formula),
    )


def all_bitstrings(size):
    """Return all possible bitstrings for some size."""
    bitstrings = np.ndarray((2**size, size), dtype=int)
    for i in range(size):
        bitstrings[:, i] = np.tile(
            np.repeat(np.array([0, 1]), 2 ** (size - i - 1)), 2**i
        )
    return bitstrings


def _clause_starts(formula: CSRFormula):
    """Return the start offset of every clause."""
    return np.concatenate(([0], formula.offsets[:-1])).astype(np.intp)


def violated_clauses(formula: CSRFormula, assignment):
    """Return an array with a 1 for each clause the assignment violates and 0 otherwise.

    Args:
        formula (CSRFormula): formula to evaluate
        assignment (array): 0/1 values, entry i holding the value of variable i + 1

    Returns:
        np.ndarray: violation indicator per clause
    """
    assignment = np.asarray(assignment)
    if formula.clause_count() == 0:
        return np.zeros(0, dtype=int)
    literals = formula.literals
    values = assignment[np.abs(literals) - 1].astype(bool)
    literal_is_true = values == (literals > 0)
    clause_is_satisfied = np.logical_or.reduceat(
        literal_is_true, _clause_starts(formula)
    )
    return np.logical_not(clause_is_satisfied).astype(int)


def is_satisfied_by(formula: CSRFormula, assignment):
    """Check whether an assignment satisfies every clause."""
    return not np.any(violated_clauses(formula, assignment))


def brute_force_models(formula: CSRFormula, n_variables=None):
    """Return every satisfying assignment over the first n_variables variables.

    Args:
        formula (CSRFormula): formula to evaluate
        n_variables (int, optional): number of variables to enumerate. Defaults to
            the maximum variable of the formula.

    Raises:
        ValueError: if more than MAX_BRUTE_FORCE_VARIABLES variables would be enumerated

    Returns:
        np.ndarray: (n_models, n_variables) array of 0/1 assignments
    """
    if n_variables is None:
        n_variables = formula.max_variable()
    if n_variables > MAX_BRUTE_FORCE_VARIABLES:
        raise ValueError(
            f"refusing to enumerate 2**{n_variables} assignments "
            f"(limit is {MAX_BRUTE_FORCE_VARIABLES} variables)"
        )
    bitstrings = all_bitstrings(n_variables)
    if formula.clause_count() == 0:
        return bitstrings
    literals = formula.literals
    values = bitstrings[:, np.abs(literals) - 1].astype(bool)
    literal_is_true = values == (literals > 0)
    clause_is_satisfied = np.logical_or.reduceat(
        literal_is_true, _clause_starts(formula), axis=1
    )
    return bitstrings[np.all(clause_is_satisfied, axis=1)]


def is_satisfiable_brute_force(formula: CSRFormula):
    """Check satisfiability by enumerating all assignments."""
    return len(brute_force_models(formula)) > 0


def model_to_assignment(model, n_variables):
    """Convert a pysat model (list of signed ints) into a 0/1 assignment array."""
    assignment = np.zeros(n_variables, dtype=int)
    for literal in model:
        if abs(literal) <= n_variables:
            assignment[abs(literal) - 1] = int(literal > 0)
    return assignment


def project_assignment(assignment, reduction: Reduction):
    """Restrict an assignment of the reduced formula to the original variables."""
    return np.asarray(assignment)[: reduction.original_max_variable]


def extend_assignment(assignment, reduction: Reduction):
    """Extend an assignment of the original formula to the reduced formula.

    Every fresh variable of a cycle receives the value of the cycle's origin.
    """
    assignment = np.asarray(assignment)
    n_variables = max(
        [reduction.original_max_variable] + [c.last for c in reduction.cycles]
    )
    extended = np.zeros(n_variables, dtype=assignment.dtype)
    extended[: reduction.original_max_variable] = assignment[
        : reduction.original_max_variable
    ]
    for cycle in reduction.cycles:
        extended[cycle.first - 1 : cycle.last] = assignment[cycle.origin - 1]
    return extended


def solve(formula: CSRFormula):
    """Solve the formula with Glucose3, returning a model or None if unsatisfiable."""
    with Glucose3(bootstrap_with=formula.to_clauses()) as solver:
        if solver.solve():
            return solver.get_model()
    return None

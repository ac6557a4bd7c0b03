"""Count how often every variable occurs in a formula."""
import logging

import numpy as np

from sat3occ.src.clause_store import CSRFormula

logger = logging.getLogger(__name__)

DEGREE_BOUND = 3


def occurrence_counts(formula: CSRFormula):
    """Count the literal positions of every variable, both polarities summed.

    Args:
        formula (CSRFormula): formula to analyse

    Returns:
        np.ndarray: array of length max_variable + 1, entry v holding the number
            of occurrences of variable v (entry 0 is always 0)
    """
    return np.bincount(np.abs(formula.literals), minlength=formula.max_variable() + 1)


def over_occurring(formula: CSRFormula, bound=DEGREE_BOUND):
    """Return the variables occurring more than `bound` times.

    Args:
        formula (CSRFormula): formula to analyse
        bound (int, optional): maximum allowed number of occurrences. Defaults to 3.

    Returns:
        dict: variable -> occurrence count, in ascending variable order
    """
    counts = occurrence_counts(formula)
    variables = np.flatnonzero(counts > bound)
    selected = {int(v): int(counts[v]) for v in variables}
    logger.debug(
        "%d of %d variables occur more than %d times",
        len(selected),
        formula.max_variable(),
        bound,
    )
    return selected


def max_occurrence(formula: CSRFormula):
    """Return the highest occurrence count of any variable (0 for an empty formula)."""
    counts = occurrence_counts(formula)
    return int(counts.max()) if len(counts) else 0

"""Reduction of a CNF formula to 3-occurrence normal form.

Every variable v that occurs more than three times keeps its first occurrence.
Each later occurrence is renamed to its own fresh variable g1, ..., gk (sign
preserved) and the implication cycle

    v -> g1 -> g2 -> ... -> gk -> v

is appended, one two-literal clause (-a, b) per edge. A cycle of implications
forces all its variables to take the same value in every model, so the new
formula is satisfiable iff the old one is. Afterwards v and every gi occur
exactly three times: once in an original clause and once in each of the two
cycle edges touching it.
"""
import collections
import logging

import numpy as np

from sat3occ.src.clause_store import CSRFormula, LITERAL_DTYPE
from sat3occ.src.literals import implication
from sat3occ.src.occurrences import over_occurring

logger = logging.getLogger(__name__)

# origin is equivalent to every variable in first..last
Cycle = collections.namedtuple("Cycle", ("origin", "first", "last"))

Reduction = collections.namedtuple("Reduction", ("original_max_variable", "cycles"))


def fresh_variables(cycle: Cycle):
    """Return the range of variables introduced for a cycle."""
    return range(cycle.first, cycle.last + 1)


def occurrence_positions(formula: CSRFormula, variables):
    """Return, for each variable, its literal positions in store order.

    Args:
        formula (CSRFormula): formula to scan
        variables (iterable): variables of interest

    Returns:
        dict: variable -> np.ndarray of positions into `formula.literals`
    """
    magnitudes = np.abs(formula.literals)
    order = np.argsort(magnitudes, kind="stable")
    sorted_magnitudes = magnitudes[order]
    positions = {}
    for variable in variables:
        lo, hi = np.searchsorted(sorted_magnitudes, [variable, variable + 1])
        positions[variable] = order[lo:hi]
    return positions


def build_gadget(formula: CSRFormula, variable, next_free, positions=None):
    """Rename all but the first occurrence of `variable` and close the cycle.

    Args:
        formula (CSRFormula): formula, modified in place
        variable (int): variable to split
        next_free (int): first unused variable number
        positions (np.ndarray, optional): positions of `variable` in store order.
            Computed by scanning the formula if not given.

    Returns:
        tuple: (new high-water mark, Cycle or None if nothing had to be renamed)
    """
    literals = formula.literals
    if positions is None:
        positions = np.flatnonzero(np.abs(literals) == variable)
    renamed = positions[1:]
    k = len(renamed)
    if k == 0:
        return next_free, None

    fresh = np.arange(next_free, next_free + k, dtype=LITERAL_DTYPE)
    formula.rewrite(renamed, np.where(literals[renamed] > 0, fresh, -fresh))

    chain = [variable] + fresh.tolist()
    for head, tail in zip(chain, chain[1:] + [variable]):
        formula.append_clause(implication(head, tail))

    return next_free + k, Cycle(variable, next_free, next_free + k - 1)


def to_3_occurrence(formula: CSRFormula):
    """Transform `formula` in place so that no variable occurs more than 3 times.

    The occurrence analysis runs once, before any gadget is built. Variables
    are processed in ascending order and fresh variables are numbered from
    max_variable() + 1 upwards without reuse.

    Args:
        formula (CSRFormula): formula to transform

    Returns:
        Reduction: original maximum variable and the cycles that were added
    """
    original_max_variable = formula.max_variable()
    selected = over_occurring(formula)
    positions = occurrence_positions(formula, selected)

    next_free = original_max_variable + 1
    cycles = []
    for variable, count in selected.items():
        next_free, cycle = build_gadget(
            formula, variable, next_free, positions[variable]
        )
        logger.debug(
            "variable %d (%d occurrences) -> fresh variables %d..%d",
            variable,
            count,
            cycle.first,
            cycle.last,
        )
        cycles.append(cycle)

    logger.info(
        "split %d variables, introduced %d fresh variables and %d clauses",
        len(cycles),
        next_free - original_max_variable - 1,
        sum(len(fresh_variables(c)) + 1 for c in cycles),
    )
    return Reduction(original_max_variable, tuple(cycles))

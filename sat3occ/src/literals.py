"""Primitive helpers for variables and literals.

A variable is a positive integer, a literal is a non-zero signed integer whose
magnitude is the variable and whose sign is the polarity. The integer 0 only
ever shows up as the clause terminator of the DIMACS exchange format.
"""
import numbers


def check_literal(literal):
    """Return literal as a plain int, rejecting 0 and non-integral values.

    Args:
        literal (int): candidate literal

    Raises:
        ValueError: if the literal is 0 or not an integer

    Returns:
        int: the literal
    """
    if isinstance(literal, bool) or not isinstance(literal, numbers.Integral):
        raise ValueError(f"literal must be an integer, got {literal!r}")
    if literal == 0:
        raise ValueError("literal 0 is reserved as the clause terminator")
    return int(literal)


def variable_of(literal):
    """Return the variable a literal refers to."""
    return abs(literal)


def is_positive(literal):
    """Return True for an unnegated literal."""
    return literal > 0


def negate(literal):
    """Return the literal of opposite polarity."""
    return -literal


def with_polarity_of(variable, literal):
    """Return variable carrying the sign of literal."""
    return variable if literal > 0 else -variable


def implication(a_variable, b_variable):
    """Encode the implication a -> b as the two literal clause (-a, b)."""
    return (-a_variable, b_variable)

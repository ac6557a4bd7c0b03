"""Straightforward list-of-clauses version of the 3-occurrence transform.

Kept as a ground truth for differential tests of the CSR implementation in
gadget.py; both must produce exactly the same clauses.
"""
from collections import Counter


def max_variable(clauses):
    """Return the largest variable in a list of clauses, 0 if there is none."""
    return max((abs(literal) for clause in clauses for literal in clause), default=0)


def to_3_occurrence(clauses):
    """Rewrite `clauses` (a list of lists of ints) in place and return it."""
    counts = Counter(abs(literal) for clause in clauses for literal in clause)
    next_free = max_variable(clauses) + 1

    for variable in sorted(v for v, n in counts.items() if n > 3):
        first_free = next_free
        first_hit = True
        for clause in clauses:
            for i, literal in enumerate(clause):
                if abs(literal) != variable:
                    continue
                if first_hit:
                    first_hit = False
                    continue
                clause[i] = next_free if literal > 0 else -next_free
                next_free += 1

        chain = [variable] + list(range(first_free, next_free))
        for head, tail in zip(chain, chain[1:] + [variable]):
            clauses.append([-head, tail])
    return clauses

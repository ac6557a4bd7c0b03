"""Contains functions to generate random SAT instances together with their 3-occurrence reductions."""
import logging
import random
import cnfgen
import numpy as np
from sat3occ.src.clause_store import CSRFormula
from sat3occ.src.data_utils import REDUCED_SUFFIX, write_atomically
from sat3occ.src.dimacs import from_string, save_dimacs
from sat3occ.src.gadget import to_3_occurrence
from sat3occ.src.sat_instances import solve

logger = logging.getLogger(__name__)


def random_kcnf(k_locality, n_variables, n_clauses, seed=None) -> CSRFormula:
    """Draw a random k-CNF formula with numpy.

    Every clause holds k_locality distinct variables with random polarities.

    Args:
        k_locality (int): number of literals per clause
        n_variables (int): number of variables to draw from
        n_clauses (int): number of clauses
        seed (int, optional): seed of the random generator. Defaults to None.

    Returns:
        CSRFormula: the random formula
    """
    rng = np.random.default_rng(seed)
    formula = CSRFormula()
    for _ in range(n_clauses):
        variables = rng.choice(n_variables, size=k_locality, replace=False) + 1
        signs = rng.choice([-1, 1], size=k_locality)
        formula.append_clause((variables * signs).tolist())
    return formula


def high_occurrence_cnf(
    n_variables, n_clauses, max_clause_length, n_hot_variables=1, seed=None
) -> CSRFormula:
    """Draw a random formula in which a few "hot" variables occur in most clauses.

    Clause lengths vary between 1 and max_clause_length, and literals may repeat
    inside a clause, so the result exercises every path of the transform.

    Args:
        n_variables (int): number of variables to draw from
        n_clauses (int): number of clauses
        max_clause_length (int): maximum number of literals per clause
        n_hot_variables (int, optional): number of over-represented variables. Defaults to 1.
        seed (int, optional): seed of the random generator. Defaults to None.

    Returns:
        CSRFormula: the random formula
    """
    rng = np.random.default_rng(seed)
    hot = np.arange(1, n_hot_variables + 1)
    formula = CSRFormula()
    for _ in range(n_clauses):
        length = rng.integers(1, max_clause_length + 1)
        variables = rng.integers(1, n_variables + 1, size=length)
        if rng.random() < 0.75:
            variables[0] = rng.choice(hot)
        signs = rng.choice([-1, 1], size=length)
        formula.append_clause((variables * signs).tolist())
    return formula


def generate_random_kcnf(k_locality, n_variables, n_clauses, path, timeout=100):
    """Generate a single satisfiable random_KCNF formula and its reduction.

    Writes path.cnf and its reduction path_3occ.cnf.

    Args:
        k_locality (int): locality of instance
        n_variables (int): number of variables of instance
        n_clauses (int): number of clauses contained in instance
        path (str): path and name how instance should be saved
        timeout (int, optional): how often we try to generate a satisfying formula until we return no instance. Defaults to 100.

    Returns:
        bool: whether an instance was written
    """
    current_time = 0
    sol = None
    while current_time <= timeout and not sol:
        current_time += 1
        dimacs = cnfgen.RandomKCNF(k_locality, n_variables, n_clauses).to_dimacs()
        formula = from_string(dimacs)
        sol = solve(formula)
        if sol:
            save_dimacs(formula, path + ".cnf")
            to_3_occurrence(formula)
            write_atomically(formula, path + REDUCED_SUFFIX)
    if not sol:
        logger.warning(
            "no satisfiable random_KCNF problem found for (n,k,m)=(%d,%d,%d)",
            n_variables,
            k_locality,
            n_clauses,
        )
    return bool(sol)


def generate_dataset_random_kcnf(
    k_locality, n_variables_list, alpha, num_samples, path, vary_percent=0, timeout=100
):
    """Generate a random_KCNF dataset with reductions.

    Args:
        k_locality (int): locality of clauses
        n_variables_list (list): list of number of variables that should be used for generating
        alpha (float): float describing the desired density of KCNF
        num_samples (int): number of samples generated per value in n_list
        path (str): path of where dataset should be saved
        vary_percent (float, optional): describes by how much we vary m at maximum
        timeout (int, optional): how often we try to generate a satisfying formula until we return no instance. Defaults to 100.
    """
    for n_variables in n_variables_list:
        for _ in range(num_samples):
            vary = 2 * (1 / 2 - random.random()) * vary_percent
            n_clauses = int((1 + vary) * alpha * n_variables)
            index = str(random.randint(0, 10000000))
            params = f"{k_locality}_{n_variables}_{n_clauses}_"
            generate_random_kcnf(
                k_locality,
                n_variables,
                n_clauses,
                path=path + "random_KCNF" + params + index,
                timeout=timeout,
            )

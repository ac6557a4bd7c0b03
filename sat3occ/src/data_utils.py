"""Contains useful functions to deal with data files (i.e. cnf files and their 3-occurrence reductions in a dataset)."""

import collections
import glob
import logging
import os
import tempfile
from os.path import join, exists
from func_timeout import func_timeout, FunctionTimedOut

from sat3occ.src.clause_store import CSRFormula
from sat3occ.src.dimacs import read_dimacs, save_dimacs
from sat3occ.src.gadget import to_3_occurrence
from sat3occ.src.sat_instances import formula_stats, solve


logger = logging.getLogger(__name__)

MAX_TIME = 20
REDUCED_SUFFIX = "_3occ.cnf"

SolveResult = collections.namedtuple("SolveResult", ("satisfiable", "model"))


def timed_solve(max_time, formula: CSRFormula):
    """Try to solve a formula within some time using the Glucose3 solver.

    Returns:
        SolveResult: satisfiability and model, or None if the time limit was hit
    """
    try:
        model = func_timeout(max_time, solve, args=(formula,))
    except FunctionTimedOut:
        logger.warning("Could not be solved within time limit of %s seconds", max_time)
        return None
    return SolveResult(model is not None, model)


def check_equisatisfiable(original: CSRFormula, reduced: CSRFormula, max_time=MAX_TIME):
    """Check with a solver that both formulas agree on satisfiability.

    Returns:
        bool: whether they agree, or None if either solve timed out
    """
    results = [timed_solve(max_time, formula) for formula in (original, reduced)]
    if None in results:
        return None
    return results[0].satisfiable == results[1].satisfiable


def _default_file_mode():
    """Return the mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_atomically(formula: CSRFormula, path):
    """Write a formula so that `path` only ever holds complete output.

    The text goes to a temporary file in the target directory, which is moved
    over `path` once writing succeeded and removed on any failure.
    The moved file gets the permissions a plain `open` would have given it.
    """
    directory = os.path.dirname(os.path.abspath(path))
    suffix = ".tmp.gz" if str(path).endswith(".gz") else ".tmp"
    handle, tmp_path = tempfile.mkstemp(dir=directory, suffix=suffix)
    os.close(handle)
    try:
        save_dimacs(formula, tmp_path)
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise


def reduce_file(source, target, strict=False):
    """Read `source`, reduce it to 3-occurrence form and write it to `target`.

    Args:
        source (str): path of the input formula (.cnf or .cnf.gz)
        target (str): path the reduced formula is written to
        strict (bool, optional): validate the header counts of `source`. Defaults to False.

    Returns:
        Reduction: record of the cycles that were introduced
    """
    formula = read_dimacs(source, strict=strict)
    before = formula_stats(formula)
    reduction = to_3_occurrence(formula)
    after = formula_stats(formula)
    logger.info(
        "%s: %d vars / %d clauses / max occurrence %d -> "
        "%d vars / %d clauses / max occurrence %d",
        source,
        before.n_variables,
        before.n_clauses,
        before.max_occurrence,
        after.n_variables,
        after.n_clauses,
        after.max_occurrence,
    )
    write_atomically(formula, target)
    return reduction


def reduce_from_cnf(path, strict=False):
    """Reduce all *.cnf files in a directory."""
    return reduce_directory(path, suffix="*.cnf", strict=strict)


def reduce_from_gzip(path, strict=False):
    """Reduce all *.cnf.gz files in a directory."""
    return reduce_directory(path, suffix="*.cnf.gz", strict=strict)


def reduce_directory(path, suffix, strict=False):
    """Reduce every matching formula in a directory, writing <root>_3occ.cnf beside it.

    Inputs that already are reductions and inputs whose reduction already
    exists are skipped.

    Returns:
        list: paths of the reduced formulas written by this call
    """
    written = []
    for file in sorted(glob.glob(join(path, suffix))):
        root = file.split(".cnf")[0]
        if root.endswith(REDUCED_SUFFIX.split(".cnf")[0]):
            continue
        target = root + REDUCED_SUFFIX
        if exists(target):
            logger.info("reduction %s already exists", target)
            continue
        logger.info("processing %s", file)
        reduce_file(file, target, strict=strict)
        written.append(target)
    return written

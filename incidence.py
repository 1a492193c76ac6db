"""
Incidence preprocessing: raw tool x job 0/1 matrix -> index sets.

Rows are tools, columns are jobs. Both directions of the relation are built
from the matrix and cross-checked before anything downstream sees them.
"""
import numbers

import ssp_utils.logging as logging
from data_structures import Incidence
from exceptions import InvalidInstance

logger = logging.getLogger(__name__)


def _as_rows(matrix):
    # pandas DataFrame / numpy array both expose .tolist() via .values or directly
    if hasattr(matrix, "values") and not isinstance(matrix, dict):
        matrix = matrix.values
    if hasattr(matrix, "tolist"):
        matrix = matrix.tolist()
    try:
        rows = [list(r) for r in matrix]
    except TypeError as e:
        raise InvalidInstance(f"Incidence matrix must be a 2-D sequence: {e}") from e
    if not rows or not rows[0]:
        raise InvalidInstance("Incidence matrix is empty")
    width = len(rows[0])
    for t, r in enumerate(rows, start=1):
        if len(r) != width:
            raise InvalidInstance(f"Row {t} has {len(r)} entries, expected {width}")
    return rows


def _as_bit(value, tool, job):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Real) and value in (0, 1):
        return int(value)
    raise InvalidInstance(f"Entry (tool={tool}, job={job}) is {value!r}; only 0/1 allowed")


def build_incidence(matrix) -> Incidence:
    """
    Build ToolsRequiredByJob / JobsRequiringTool from an m x n 0/1 matrix.

    Raises InvalidInstance for non-binary entries, ragged rows, an empty
    matrix, a tool no job needs, or a job that needs no tool.
    """
    rows = _as_rows(matrix)
    m = len(rows)
    n = len(rows[0])
    bits = [[_as_bit(rows[t][j], t + 1, j + 1) for j in range(n)] for t in range(m)]

    # Tj: for each job (column), tools with a 1
    tools_by_job = tuple(
        frozenset(t + 1 for t in range(m) if bits[t][j] == 1) for j in range(n)
    )
    # Jt: for each tool (row), jobs with a 1
    jobs_by_tool = tuple(
        frozenset(j + 1 for j in range(n) if bits[t][j] == 1) for t in range(m)
    )

    idle_tools = [t + 1 for t, js in enumerate(jobs_by_tool) if not js]
    if idle_tools:
        raise InvalidInstance(f"Tools required by no job: {idle_tools}")
    empty_jobs = [j + 1 for j, ts in enumerate(tools_by_job) if not ts]
    if empty_jobs:
        raise InvalidInstance(f"Jobs requiring no tool: {empty_jobs}")

    pairs_by_job = {(t, j + 1) for j, ts in enumerate(tools_by_job) for t in ts}
    pairs_by_tool = {(t + 1, j) for t, js in enumerate(jobs_by_tool) for j in js}
    if pairs_by_job != pairs_by_tool:
        raise InvalidInstance("ToolsRequiredByJob and JobsRequiringTool disagree")

    logger.debug("Incidence built: %d jobs, %d tools, %d pairs", n, m, len(pairs_by_job))
    return Incidence(n_jobs=n, n_tools=m, tools_by_job=tools_by_job, jobs_by_tool=jobs_by_tool)


def validate_capacity(incidence: Incidence, capacity) -> int:
    """Magazine capacity must be an integer in 1..m."""
    if isinstance(capacity, bool):
        raise InvalidInstance(f"Magazine capacity must be an integer, got {capacity!r}")
    if not isinstance(capacity, numbers.Integral):
        if isinstance(capacity, numbers.Real) and float(capacity).is_integer():
            capacity = int(capacity)
        else:
            raise InvalidInstance(f"Magazine capacity must be an integer, got {capacity!r}")
    capacity = int(capacity)
    if capacity <= 0:
        raise InvalidInstance(f"Magazine capacity must be positive, got {capacity}")
    if capacity > incidence.n_tools:
        raise InvalidInstance(
            f"Magazine capacity {capacity} exceeds the number of tools ({incidence.n_tools})"
        )
    return capacity


def max_tools_per_job(incidence: Incidence) -> int:
    return max(len(ts) for ts in incidence.tools_by_job)

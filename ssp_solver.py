import ssp_utils.logging as logging
logger = logging.getLogger(__name__)

from typing import Optional

from config import DEFAULT_CONFIG, SolverConfig, check_time_limit
from data_structures import INFEASIBLE, UNBOUNDED, TIME_LIMIT, SolutionRecord
from exceptions import FormulationError, Infeasible, NoSolutionFound, Unbounded
from formulation import build_formulation
from incidence import build_incidence, max_tools_per_job, validate_capacity
from solution_processor import extract_solution
from solver_adapter import SolverAdapter, get_adapter
from ssp_utils.context import instance_context
from ssp_utils.decorators import log_and_time


@log_and_time("solve_uniform_ssp", error_cls=FormulationError)
def solve_uniform_ssp(
    matrix,
    magazine_cap,
    time_limit: Optional[float] = None,
    config: Optional[SolverConfig] = None,
    adapter: Optional[SolverAdapter] = None,
    instance_id: Optional[str] = None,
) -> SolutionRecord:
    """
    Build the Tang & Denardo uniform SSP model for a tool x job 0/1 matrix,
    solve it once, and return the active U/V/W sets with solve diagnostics.

    A time-limited solve that found an incumbent is returned as a normal
    record (status TIME_LIMIT, gap > 0 or unknown). Infeasibility, an
    unbounded report and "no incumbent" are raised as Infeasible / Unbounded /
    NoSolutionFound.
    """
    config = config or DEFAULT_CONFIG
    time_limit = check_time_limit(config.TimeLimit if time_limit is None else time_limit)

    # Validation happens before any variable exists
    inc = build_incidence(matrix)
    capacity = validate_capacity(inc, magazine_cap)

    adapter = adapter or get_adapter(config)
    instance_id = instance_id or f"ssp_{inc.n_tools}x{inc.n_jobs}_C{capacity}"

    with instance_context(instance_id, backend=adapter.name):
        logger.info("Instance: %d jobs, %d tools, C=%d, time limit=%ss",
                    inc.n_jobs, inc.n_tools, capacity, time_limit)
        widest = max_tools_per_job(inc)
        if widest > capacity:
            logger.warning("A job needs %d tools but the magazine holds %d; expect infeasibility",
                           widest, capacity)

        model = build_formulation(inc, capacity)
        outcome = adapter.solve(model, time_limit)
        logger.info("Solver returned status=%s (native=%s) in %.3fs",
                    outcome.status, outcome.native_status, outcome.runtime)

        if outcome.status == UNBOUNDED:
            raise Unbounded(f"Solver reported {outcome.status}",
                            status=outcome.native_status, summary=outcome.summary)
        if outcome.status == INFEASIBLE:
            raise Infeasible(f"Solver reported {outcome.status}",
                             status=outcome.native_status, summary=outcome.summary)
        if not outcome.has_incumbent:
            raise NoSolutionFound(f"Solver stopped with status {outcome.status} and no incumbent",
                                  status=outcome.native_status, summary=outcome.summary)
        if outcome.status == TIME_LIMIT:
            logger.warning("Time limit reached; returning incumbent obj=%s gap=%s",
                           outcome.objective, outcome.gap)

        return extract_solution(model, outcome)

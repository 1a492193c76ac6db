"""
Solver adapters: translate a FormulationModel into a backend model, run a
single optimize call under a wall-clock limit, and hand back a SolverOutcome
keyed by VarHandle.

Gurobi is the default backend. PuLP/CBC is available when selected
explicitly; a backend that cannot start raises SolverUnavailable and no
other backend is tried.
"""
from typing import Dict, Optional

import ssp_utils.logging as logging
from config import DEFAULT_CONFIG, SolverConfig
from data_structures import (
    FormulationModel,
    INFEASIBLE,
    NO_SOLUTION,
    OPTIMAL,
    OTHER,
    SolverOutcome,
    TIME_LIMIT,
    UNBOUNDED,
)
from exceptions import SolverError, SolverUnavailable

logger = logging.getLogger(__name__)


class SolverAdapter:
    name = "base"

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def solve(self, model: FormulationModel, time_limit: float) -> SolverOutcome:
        raise NotImplementedError


class GurobiAdapter(SolverAdapter):
    name = "gurobi"

    @staticmethod
    def _load():
        try:
            import gurobipy as gp
            from gurobipy import GRB
        except ImportError as e:
            raise SolverUnavailable("gurobipy is not installed", status="ImportError") from e
        return gp, GRB

    def _start_env(self, gp):
        try:
            env = gp.Env(empty=True)
            env.setParam("OutputFlag", int(self.config.OutputFlag))
            env.start()
        except gp.GurobiError as e:
            raise SolverUnavailable(
                f"Gurobi environment could not start: {e}", status=getattr(e, "errno", None)
            ) from e
        return env

    def solve(self, model: FormulationModel, time_limit: float) -> SolverOutcome:
        gp, GRB = self._load()
        senses = {"==": GRB.EQUAL, "<=": GRB.LESS_EQUAL}
        status_names = {getattr(GRB.Status, n): n for n in dir(GRB.Status) if n.isupper()}

        env = self._start_env(gp)
        grb = None
        try:
            grb = gp.Model(model.name, env=env)
            gvars = {h: grb.addVar(vtype=GRB.BINARY, name=h.label) for h in model.variables}
            grb.setObjective(
                gp.LinExpr([c for _, c in model.objective], [gvars[h] for h, _ in model.objective]),
                GRB.MINIMIZE,
            )
            for con in model.constraints:
                expr = gp.LinExpr([c for _, c in con.terms], [gvars[h] for h, _ in con.terms])
                grb.addLConstr(expr, senses[con.sense], con.rhs, name=con.name)

            grb.Params.TimeLimit = float(time_limit)
            if self.config.Threads:
                grb.Params.Threads = int(self.config.Threads)

            logger.info("Gurobi optimize: %d vars, %d constrs, TimeLimit=%ss",
                        len(gvars), len(model.constraints), time_limit)
            grb.optimize()

            native = grb.Status
            sol_count = grb.SolCount
            summary = {
                "status": status_names.get(native, str(native)),
                "SolCount": sol_count,
                "NodeCount": _attr(gp, grb, "NodeCount"),
                "IterCount": _attr(gp, grb, "IterCount"),
                "ObjBound": _attr(gp, grb, "ObjBound"),
            }

            status = gurobi_status(GRB, native, sol_count)
            outcome = SolverOutcome(status=status, native_status=native,
                                    runtime=float(grb.Runtime), summary=summary)
            if sol_count > 0:
                outcome.objective = float(grb.ObjVal)
                outcome.gap = gurobi_gap(status, grb.MIPGap)
                outcome.assignment = {h: float(v.X) for h, v in gvars.items()}
            return outcome
        except gp.GurobiError as e:
            raise SolverError(f"Gurobi failed: {e}", status=getattr(e, "errno", None)) from e
        finally:
            if grb is not None:
                grb.dispose()
            env.dispose()


def gurobi_status(GRB, native, sol_count) -> str:
    """Map a Gurobi model status (plus solution count) to a normalized status."""
    if native == GRB.OPTIMAL:
        return OPTIMAL
    # binary variables are bounded, so INF_OR_UNBD can only mean infeasible
    if native in (GRB.INFEASIBLE, GRB.INF_OR_UNBD):
        return INFEASIBLE
    if native == GRB.UNBOUNDED:
        return UNBOUNDED
    if sol_count == 0:
        return NO_SOLUTION
    if native == GRB.TIME_LIMIT:
        return TIME_LIMIT
    return OTHER


def gurobi_gap(status, mip_gap) -> float:
    return 0.0 if status == OPTIMAL else float(mip_gap)


def _attr(gp, grb, name):
    # Some attributes are unavailable for certain statuses
    try:
        return getattr(grb, name)
    except (gp.GurobiError, AttributeError):
        return None


class PulpAdapter(SolverAdapter):
    name = "pulp"

    @staticmethod
    def _load():
        try:
            import pulp
        except ImportError as e:
            raise SolverUnavailable("pulp is not installed", status="ImportError") from e
        return pulp

    def solve(self, model: FormulationModel, time_limit: float) -> SolverOutcome:
        pulp = self._load()

        solver = pulp.PULP_CBC_CMD(
            msg=bool(self.config.OutputFlag),
            timeLimit=float(time_limit),
            threads=int(self.config.Threads) or None,
        )
        if not solver.available():
            raise SolverUnavailable("CBC solver is not available", status="unavailable")

        prob = pulp.LpProblem(model.name, pulp.LpMinimize)
        pvars = {h: pulp.LpVariable(h.label, cat=pulp.LpBinary) for h in model.variables}
        prob += pulp.lpSum(c * pvars[h] for h, c in model.objective), "TotalToolSwitches"
        for con in model.constraints:
            expr = pulp.lpSum(c * pvars[h] for h, c in con.terms)
            if con.sense == "==":
                prob += (expr == con.rhs), con.name
            else:
                prob += (expr <= con.rhs), con.name

        logger.info("CBC solve: %d vars, %d constrs, timeLimit=%ss",
                    len(pvars), len(model.constraints), time_limit)
        try:
            prob.solve(solver)
        except pulp.PulpSolverError as e:
            raise SolverError(f"CBC failed: {e}", status="PulpSolverError") from e

        sol_status = prob.sol_status
        native = (prob.status, sol_status)
        summary = {
            "status": pulp.LpStatus.get(prob.status, str(prob.status)),
            "sol_status": pulp.LpSolution.get(sol_status, str(sol_status)),
            "solver": solver.name,
        }

        status = pulp_status(pulp, prob.status, sol_status)
        outcome = SolverOutcome(status=status, native_status=native,
                                runtime=float(getattr(prob, "solutionTime", 0.0) or 0.0),
                                summary=summary)
        if status in (OPTIMAL, TIME_LIMIT):
            outcome.objective = float(pulp.value(prob.objective))
            outcome.gap = pulp_gap(status)
            outcome.assignment = {h: float(v.varValue) for h, v in pvars.items() if v.varValue is not None}
        return outcome


def pulp_status(pulp, status, sol_status) -> str:
    """
    Map PuLP's (status, sol_status) pair. CBC stopped at the time limit with
    an incumbent reports sol_status IntegerFeasible.
    """
    if sol_status == pulp.LpSolutionOptimal:
        return OPTIMAL
    if sol_status == pulp.LpSolutionIntegerFeasible:
        return TIME_LIMIT
    if sol_status == pulp.LpSolutionInfeasible or status == pulp.LpStatusInfeasible:
        return INFEASIBLE
    if sol_status == pulp.LpSolutionUnbounded or status == pulp.LpStatusUnbounded:
        return UNBOUNDED
    return NO_SOLUTION


def pulp_gap(status) -> Optional[float]:
    # CBC via PuLP exposes no bound, so the gap is only known at optimality
    return 0.0 if status == OPTIMAL else None


ADAPTERS: Dict[str, type] = {
    GurobiAdapter.name: GurobiAdapter,
    PulpAdapter.name: PulpAdapter,
}


def get_adapter(config: Optional[SolverConfig] = None) -> SolverAdapter:
    config = config or DEFAULT_CONFIG
    try:
        cls = ADAPTERS[config.Backend]
    except KeyError:
        raise SolverUnavailable(f"No adapter for backend {config.Backend!r}", status="unknown_backend") from None
    return cls(config)

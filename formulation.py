"""
Formulation builder for the uniform SSP (Tang & Denardo, 1988).

    U[j,k] = 1 if job j is processed in position k
    V[k,t] = 1 if tool t is in the magazine while the job in position k runs
    W[k,t] = 1 if tool t is switched in before position k

    min  sum_t V[2,t] + sum_{k != 1} sum_t W[k,t]

The model is backend-neutral (FormulationModel); solver_adapter turns it into
a gurobipy or PuLP model.
"""
from typing import Dict

import ssp_utils.logging as logging
from constraint_builder import FAMILIES, add_all_constraints
from data_structures import FormulationModel, Incidence, VarHandle, VarRole
from incidence import validate_capacity

logger = logging.getLogger(__name__)


def initial_loadout_position(n_jobs: int) -> int:
    """Position whose magazine counts as the initial loadout (2, or 1 when n == 1)."""
    return min(2, n_jobs)


def build_formulation(inc: Incidence, capacity: int, name: str = "UniformSSP_TangDenardo") -> FormulationModel:
    capacity = validate_capacity(inc, capacity)

    U = {(j, k): VarHandle(VarRole.ASSIGNMENT, (j, k)) for j in inc.jobs for k in inc.positions}
    V = {(k, t): VarHandle(VarRole.PRESENCE, (k, t)) for k in inc.positions for t in inc.tools}
    W = {(k, t): VarHandle(VarRole.SWITCH, (k, t)) for k in inc.positions for t in inc.tools}

    k0 = initial_loadout_position(inc.n_jobs)
    objective = tuple((V[(k0, t)], 1.0) for t in inc.tools) + tuple(
        (W[(k, t)], 1.0) for k in inc.positions for t in inc.tools if k != 1
    )

    constraints = add_all_constraints(inc, U, V, W, capacity)

    model = FormulationModel(
        name=name,
        variables=tuple(U.values()) + tuple(V.values()) + tuple(W.values()),
        objective=objective,
        constraints=tuple(constraints),
    )
    logger.info("Formulation %s built: %s", name, model_size(model))
    return model


def model_size(model: FormulationModel) -> Dict[str, int]:
    size = {"variables": len(model.variables), "constraints": len(model.constraints)}
    for family in FAMILIES:
        size[family] = len(model.constraints_in(family))
    return size

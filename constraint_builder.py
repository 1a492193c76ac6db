"""
The five constraint families of the Tang & Denardo (1988) uniform SSP model.

Every function takes the incidence, the variable dicts U[(j,k)], V[(k,t)],
W[(k,t)] (values are VarHandle) and returns a list of Constraint.
"""
from typing import Dict, List

from data_structures import Constraint, Incidence, Index, VarHandle

ASSIGN_BY_POSITION = "assignment_by_position"
ASSIGN_BY_JOB = "assignment_by_job"
TOOL_PRESENCE = "tool_presence"
MAGAZINE_CAPACITY = "magazine_capacity"
SWITCH_DETECTION = "switch_detection"

FAMILIES = (
    ASSIGN_BY_POSITION,
    ASSIGN_BY_JOB,
    TOOL_PRESENCE,
    MAGAZINE_CAPACITY,
    SWITCH_DETECTION,
)

VarDict = Dict[Index, VarHandle]


def add_assignment_by_position(inc: Incidence, U: VarDict) -> List[Constraint]:
    # (1) sum_j U[j,k] == 1 for every position k
    return [
        Constraint(
            name=f"AssignPos_{k}",
            family=ASSIGN_BY_POSITION,
            terms=tuple((U[(j, k)], 1.0) for j in inc.jobs),
            sense="==",
            rhs=1.0,
        )
        for k in inc.positions
    ]


def add_assignment_by_job(inc: Incidence, U: VarDict) -> List[Constraint]:
    # (2) sum_k U[j,k] == 1 for every job j
    return [
        Constraint(
            name=f"AssignJob_{j}",
            family=ASSIGN_BY_JOB,
            terms=tuple((U[(j, k)], 1.0) for k in inc.positions),
            sense="==",
            rhs=1.0,
        )
        for j in inc.jobs
    ]


def add_tool_presence(inc: Incidence, U: VarDict, V: VarDict) -> List[Constraint]:
    """
    (3) sum_{j in Jt} U[j,k] <= V[k,t], written as sum U - V <= 0.
    One-directional: V may be 1 for a tool nobody at k needs.
    """
    cons = []
    for k in inc.positions:
        for t in inc.tools:
            terms = [(U[(j, k)], 1.0) for j in sorted(inc.jobs_requiring(t))]
            terms.append((V[(k, t)], -1.0))
            cons.append(Constraint(
                name=f"ToolPresence_{k}_{t}",
                family=TOOL_PRESENCE,
                terms=tuple(terms),
                sense="<=",
                rhs=0.0,
            ))
    return cons


def add_magazine_capacity(inc: Incidence, V: VarDict, capacity: int) -> List[Constraint]:
    # (4) emitted even when capacity >= number of tools
    return [
        Constraint(
            name=f"Magazine_{k}",
            family=MAGAZINE_CAPACITY,
            terms=tuple((V[(k, t)], 1.0) for t in inc.tools),
            sense="<=",
            rhs=float(capacity),
        )
        for k in inc.positions
    ]


def add_switch_detection(inc: Incidence, V: VarDict, W: VarDict) -> List[Constraint]:
    """
    (5) V[k,t] - V[k-1,t] <= W[k,t] for k != 1.

    Only lower-bounds W; the minimizing objective keeps it tight. Do not use
    this family with a maximizing or feasibility-only objective.
    """
    cons = []
    for k in inc.positions:
        if k == 1:
            continue
        for t in inc.tools:
            cons.append(Constraint(
                name=f"Switch_{k}_{t}",
                family=SWITCH_DETECTION,
                terms=((V[(k, t)], 1.0), (V[(k - 1, t)], -1.0), (W[(k, t)], -1.0)),
                sense="<=",
                rhs=0.0,
            ))
    return cons


def add_all_constraints(inc: Incidence, U: VarDict, V: VarDict, W: VarDict, capacity: int) -> List[Constraint]:
    return (
        add_assignment_by_position(inc, U)
        + add_assignment_by_job(inc, U)
        + add_tool_presence(inc, U, V)
        + add_magazine_capacity(inc, V, capacity)
        + add_switch_detection(inc, V, W)
    )

"""
Result extraction: SolverOutcome -> SolutionRecord, plus re-scoring and
consistency checks on the active variable sets.
"""
from collections import defaultdict
from typing import List

import ssp_utils.logging as logging
from data_structures import (
    FormulationModel,
    Incidence,
    SolutionRecord,
    SolverOutcome,
    VarRole,
)
from formulation import initial_loadout_position

logger = logging.getLogger(__name__)


def extract_solution(model: FormulationModel, outcome: SolverOutcome) -> SolutionRecord:
    """
    Partition the solver assignment by variable role and keep the active
    (value rounds to 1) index tuples of each family.
    """
    declared = set(model.variables)
    unknown = [h for h in outcome.assignment if h not in declared]
    if unknown:
        raise ValueError(f"Assignment contains {len(unknown)} undeclared variable(s), e.g. {unknown[0]}")

    active = defaultdict(list)
    for handle, value in outcome.assignment.items():
        if round(value) == 1:
            active[handle.role].append(handle.index)

    record = SolutionRecord(
        objective=outcome.objective,
        gap=outcome.gap,
        runtime=outcome.runtime,
        status=outcome.status,
        assignments=tuple(sorted(active[VarRole.ASSIGNMENT])),
        presence=tuple(sorted(active[VarRole.PRESENCE])),
        switches=tuple(sorted(active[VarRole.SWITCH])),
        summary=dict(outcome.summary),
    )
    logger.info(
        "Extracted: obj=%s gap=%s U=%d V=%d W=%d",
        record.objective, record.gap,
        len(record.assignments), len(record.presence), len(record.switches),
    )
    return record


def score_objective(record: SolutionRecord, n_jobs: int) -> int:
    """Initial loadout plus every switch after position 1."""
    k0 = initial_loadout_position(n_jobs)
    loadout = sum(1 for k, _ in record.presence if k == k0)
    switches = sum(1 for k, _ in record.switches if k != 1)
    return loadout + switches


def check_solution(record: SolutionRecord, inc: Incidence, capacity: int) -> List[str]:
    """Return human-readable violations; an empty list means consistent."""
    problems = []

    by_job = defaultdict(list)
    by_pos = defaultdict(list)
    for j, k in record.assignments:
        by_job[j].append(k)
        by_pos[k].append(j)
    for j in inc.jobs:
        if len(by_job[j]) != 1:
            problems.append(f"job {j} assigned to positions {by_job[j]}")
    for k in inc.positions:
        if len(by_pos[k]) != 1:
            problems.append(f"position {k} holds jobs {by_pos[k]}")

    presence = set(record.presence)
    switches = set(record.switches)
    for j, k in record.assignments:
        for t in sorted(inc.tools_required_by(j)):
            if (k, t) not in presence:
                problems.append(f"tool {t} needed by job {j} missing at position {k}")

    for k in inc.positions:
        loaded = len(record.magazine_at(k))
        if loaded > capacity:
            problems.append(f"position {k} loads {loaded} tools > capacity {capacity}")

    for k in inc.positions:
        if k == 1:
            continue
        for t in inc.tools:
            if (k, t) in presence and (k - 1, t) not in presence and (k, t) not in switches:
                problems.append(f"tool {t} inserted at position {k} without a switch")

    return problems

import itertools

import pytest

from data_structures import OPTIMAL, SolverOutcome
from solver_adapter import SolverAdapter

REFERENCE_MATRIX = [
    [1, 1, 0, 0, 1],
    [1, 0, 0, 1, 0],
    [0, 1, 1, 1, 0],
    [1, 0, 1, 0, 1],
    [0, 0, 1, 1, 0],
    [0, 0, 0, 0, 1],
]


@pytest.fixture
def reference_matrix():
    return [row[:] for row in REFERENCE_MATRIX]


@pytest.fixture
def single_job_matrix():
    # one job needing all three tools
    return [[1], [1], [1]]


def _magazines(required, tools, capacity):
    optional = [t for t in tools if t not in required]
    for extra in range(0, capacity - len(required) + 1):
        for combo in itertools.combinations(optional, extra):
            yield frozenset(required) | frozenset(combo)


def brute_force_min_switches(matrix, capacity):
    """
    Exhaustive optimum of sum_t V[2,t] + sum_{k>=2} |V_k minus V_{k-1}|
    over job orders and magazine contents.
    """
    m, n = len(matrix), len(matrix[0])
    tools = range(1, m + 1)
    req = {j: {t for t in tools if matrix[t - 1][j - 1] == 1} for j in range(1, n + 1)}
    if n == 1:
        return len(req[1])

    best = None
    for order in itertools.permutations(range(1, n + 1)):
        layer = {v: 0 for v in _magazines(req[order[0]], tools, capacity)}
        for k, job in enumerate(order[1:], start=2):
            nxt = {}
            for v in _magazines(req[job], tools, capacity):
                cost = min(c + len(v - prev) for prev, c in layer.items())
                if k == 2:
                    cost += len(v)
                nxt[v] = cost
            layer = nxt
        value = min(layer.values())
        best = value if best is None else min(best, value)
    return best


class CannedAdapter(SolverAdapter):
    """Returns a prepared outcome; records the models it was given."""
    name = "canned"

    def __init__(self, outcome_factory):
        super().__init__()
        self.outcome_factory = outcome_factory
        self.models = []

    def solve(self, model, time_limit):
        self.models.append((model, time_limit))
        return self.outcome_factory(model)


def outcome_for_sequence(model, inc, sequence, status=OPTIMAL, gap=0.0, objective=None):
    """
    Feasible assignment for a given job order: magazine holds exactly the
    tools of the current job, switches are the newly needed tools.
    """
    from data_structures import VarRole

    position_of = {job: k for k, job in enumerate(sequence, start=1)}
    loaded = {k: inc.tools_required_by(job) for k, job in enumerate(sequence, start=1)}

    assignment = {}
    for h in model.variables:
        a, b = h.index
        if h.role is VarRole.ASSIGNMENT:
            value = 1.0 if position_of[a] == b else 0.0
        elif h.role is VarRole.PRESENCE:
            value = 1.0 if b in loaded[a] else 0.0
        else:
            value = 1.0 if a > 1 and b in loaded[a] and b not in loaded[a - 1] else 0.0
        assignment[h] = value

    if objective is None:
        k0 = min(2, inc.n_jobs)
        objective = len(loaded[k0]) + sum(
            len(loaded[k] - loaded[k - 1]) for k in range(2, inc.n_jobs + 1)
        )
    return SolverOutcome(status=status, native_status="canned", objective=float(objective),
                         gap=gap, runtime=0.01, assignment=assignment,
                         summary={"status": status})

"""Index sets, variable handles, the backend-neutral model, and result records."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

Index = Tuple[int, int]


@dataclass(frozen=True)
class Incidence:
    """
    Job/tool incidence for one instance. Ids are 1-based; the tuples are
    indexed by id - 1.
    """
    n_jobs: int
    n_tools: int
    tools_by_job: Tuple[FrozenSet[int], ...]
    jobs_by_tool: Tuple[FrozenSet[int], ...]

    @property
    def jobs(self) -> range:
        return range(1, self.n_jobs + 1)

    @property
    def positions(self) -> range:
        return range(1, self.n_jobs + 1)

    @property
    def tools(self) -> range:
        return range(1, self.n_tools + 1)

    def tools_required_by(self, job: int) -> FrozenSet[int]:
        if not 1 <= job <= self.n_jobs:
            raise IndexError(f"job {job} outside 1..{self.n_jobs}")
        return self.tools_by_job[job - 1]

    def jobs_requiring(self, tool: int) -> FrozenSet[int]:
        if not 1 <= tool <= self.n_tools:
            raise IndexError(f"tool {tool} outside 1..{self.n_tools}")
        return self.jobs_by_tool[tool - 1]


class VarRole(Enum):
    ASSIGNMENT = "U"  # job j at position k
    PRESENCE = "V"    # tool t in magazine at position k
    SWITCH = "W"      # tool t inserted before position k


@dataclass(frozen=True)
class VarHandle:
    role: VarRole
    index: Index

    @property
    def label(self) -> str:
        # Display/backend name only; results are matched on (role, index)
        return f"{self.role.value}_{self.index[0]}_{self.index[1]}"


Term = Tuple[VarHandle, float]


@dataclass(frozen=True)
class Constraint:
    name: str
    family: str
    terms: Tuple[Term, ...]
    sense: str  # "==" or "<="
    rhs: float


@dataclass(frozen=True)
class FormulationModel:
    name: str
    variables: Tuple[VarHandle, ...]
    objective: Tuple[Term, ...]
    constraints: Tuple[Constraint, ...]
    sense: str = "minimize"

    def constraints_in(self, family: str) -> Tuple[Constraint, ...]:
        return tuple(c for c in self.constraints if c.family == family)

    def variables_of(self, role: VarRole) -> Tuple[VarHandle, ...]:
        return tuple(v for v in self.variables if v.role is role)


# Normalized solver statuses
OPTIMAL = "OPTIMAL"
TIME_LIMIT = "TIME_LIMIT"
INFEASIBLE = "INFEASIBLE"
UNBOUNDED = "UNBOUNDED"
NO_SOLUTION = "NO_SOLUTION"
OTHER = "OTHER"


@dataclass
class SolverOutcome:
    """Raw result handed back by a solver adapter."""
    status: str
    native_status: Any
    objective: Optional[float] = None
    gap: Optional[float] = None
    runtime: float = 0.0
    assignment: Dict[VarHandle, float] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_incumbent(self) -> bool:
        return self.objective is not None and bool(self.assignment)


@dataclass(frozen=True)
class SolutionRecord:
    """
    Active U/V/W index tuples plus solve diagnostics.

    gap is 0.0 when optimality was proven. A time-limited Gurobi solve carries
    its MIPGap; a time-limited PuLP/CBC solve has gap None because CBC reports
    no bound there, so only status == TIME_LIMIT flags it.
    """
    objective: float
    gap: Optional[float]
    runtime: float
    status: str
    assignments: Tuple[Index, ...]
    presence: Tuple[Index, ...]
    switches: Tuple[Index, ...]
    summary: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "summary", MappingProxyType(dict(self.summary)))

    @property
    def is_optimal(self) -> bool:
        return self.status == OPTIMAL

    def job_sequence(self) -> Tuple[int, ...]:
        """Job ids ordered by position."""
        return tuple(j for j, _ in sorted(self.assignments, key=lambda jk: jk[1]))

    def magazine_at(self, position: int) -> FrozenSet[int]:
        return frozenset(t for k, t in self.presence if k == position)

    def switches_at(self, position: int) -> FrozenSet[int]:
        return frozenset(t for k, t in self.switches if k == position)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "objective": self.objective,
            "gap": self.gap,
            "runtime": self.runtime,
            "status": self.status,
            "sequence": list(self.job_sequence()),
            "U_active": [list(i) for i in self.assignments],
            "V_active": [list(i) for i in self.presence],
            "W_active": [list(i) for i in self.switches],
            "summary": dict(self.summary),
        }

from collections import Counter

import pytest

import constraint_builder as cb
from data_structures import VarRole
from exceptions import InvalidInstance
from formulation import build_formulation, model_size
from incidence import build_incidence


@pytest.fixture
def ref_model(reference_matrix):
    return build_formulation(build_incidence(reference_matrix), 3)


def test_variable_families_sized(ref_model):
    counts = Counter(h.role for h in ref_model.variables)
    assert counts[VarRole.ASSIGNMENT] == 5 * 5
    assert counts[VarRole.PRESENCE] == 5 * 6
    assert counts[VarRole.SWITCH] == 5 * 6
    assert len(set(ref_model.variables)) == len(ref_model.variables)


def test_constraint_counts(ref_model):
    size = model_size(ref_model)
    assert size[cb.ASSIGN_BY_POSITION] == 5
    assert size[cb.ASSIGN_BY_JOB] == 5
    assert size[cb.TOOL_PRESENCE] == 5 * 6
    assert size[cb.MAGAZINE_CAPACITY] == 5
    assert size[cb.SWITCH_DETECTION] == 4 * 6
    assert size["constraints"] == 5 + 5 + 30 + 5 + 24


def test_objective_terms(ref_model):
    presence = [h.index for h, _ in ref_model.objective if h.role is VarRole.PRESENCE]
    switches = [h.index for h, _ in ref_model.objective if h.role is VarRole.SWITCH]
    assert sorted(presence) == [(2, t) for t in range(1, 7)]
    assert sorted(switches) == [(k, t) for k in range(2, 6) for t in range(1, 7)]
    assert all(c == 1.0 for _, c in ref_model.objective)


def test_tool_presence_uses_demand_set(ref_model):
    con = next(c for c in ref_model.constraints_in(cb.TOOL_PRESENCE) if c.name == "ToolPresence_3_1")
    coefs = {(h.role, h.index): c for h, c in con.terms}
    # tool 1 is needed by jobs 1, 2, 5
    assert coefs == {
        (VarRole.ASSIGNMENT, (1, 3)): 1.0,
        (VarRole.ASSIGNMENT, (2, 3)): 1.0,
        (VarRole.ASSIGNMENT, (5, 3)): 1.0,
        (VarRole.PRESENCE, (3, 1)): -1.0,
    }
    assert con.sense == "<=" and con.rhs == 0.0


def test_switch_detection_links_consecutive_positions(ref_model):
    con = next(c for c in ref_model.constraints_in(cb.SWITCH_DETECTION) if c.name == "Switch_4_2")
    coefs = {(h.role, h.index): c for h, c in con.terms}
    assert coefs == {
        (VarRole.PRESENCE, (4, 2)): 1.0,
        (VarRole.PRESENCE, (3, 2)): -1.0,
        (VarRole.SWITCH, (4, 2)): -1.0,
    }


def test_assignment_constraints_are_equalities(ref_model):
    for family in (cb.ASSIGN_BY_POSITION, cb.ASSIGN_BY_JOB):
        for con in ref_model.constraints_in(family):
            assert con.sense == "==" and con.rhs == 1.0
            assert len(con.terms) == 5


def test_capacity_emitted_when_not_binding(reference_matrix):
    model = build_formulation(build_incidence(reference_matrix), 6)
    cons = model.constraints_in(cb.MAGAZINE_CAPACITY)
    assert len(cons) == 5
    assert all(c.rhs == 6.0 and len(c.terms) == 6 for c in cons)


def test_single_job_model(single_job_matrix):
    model = build_formulation(build_incidence(single_job_matrix), 3)
    size = model_size(model)
    assert size[cb.SWITCH_DETECTION] == 0
    assert size[cb.ASSIGN_BY_POSITION] == 1
    assert size[cb.ASSIGN_BY_JOB] == 1
    assert size[cb.TOOL_PRESENCE] == 3
    assert size[cb.MAGAZINE_CAPACITY] == 1
    # only the loadout term remains, evaluated at the single position
    assert all(h.role is VarRole.PRESENCE and h.index[0] == 1 for h, _ in model.objective)
    assert len(model.objective) == 3


def test_capacity_validated(reference_matrix):
    with pytest.raises(InvalidInstance):
        build_formulation(build_incidence(reference_matrix), 0)


def test_labels_are_unique(ref_model):
    labels = [h.label for h in ref_model.variables]
    assert len(set(labels)) == len(labels)
    names = [c.name for c in ref_model.constraints]
    assert len(set(names)) == len(names)

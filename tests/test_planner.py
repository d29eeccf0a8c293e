import pytest
from pydantic import ValidationError

from loadplanner.optimization.planner import (
    check_custom_distribution,
    derive_summary,
    plan,
    plan_distribution,
)
from loadplanner.sizing.models import (
    DistributionPolicy,
    ElectricalConstants,
    LineupSpec,
    PlanningRequest,
)

from conftest import PDU_MAX_KW, SUBFEED_MAX_KW


def test_derive_summary_default_topology(five_lineups, constants, policy):
    s = derive_summary(five_lineups, 5000.0, constants, policy)
    assert s.total_pdus == 10
    assert s.even_load_per_pdu_kw == pytest.approx(500.0)
    assert s.pdu_max_kw == pytest.approx(PDU_MAX_KW, abs=1e-3)
    assert s.subfeed_max_kw == pytest.approx(SUBFEED_MAX_KW, abs=1e-3)
    assert s.total_capacity_kw == pytest.approx(10 * PDU_MAX_KW, abs=1e-2)
    assert s.total_capacity_mw == pytest.approx(6.62, abs=0.01)
    assert s.effective_capacity_kw == pytest.approx(10 * PDU_MAX_KW, abs=1e-2)


def test_derive_summary_caps_effective_capacity(constants, policy):
    request = PlanningRequest(
        target_load_kw=0,
        lineups=[LineupSpec(name="A01", pdus=[0], subfeeds={0: list(range(8))})],
    )
    s = derive_summary(request.to_selection(), 0.0, constants, policy)
    assert s.total_pdus == 1
    assert s.total_capacity_kw == pytest.approx(8 * SUBFEED_MAX_KW, abs=1e-2)
    assert s.effective_capacity_kw == pytest.approx(2 * PDU_MAX_KW, abs=1e-2)


def test_derive_summary_empty(empty_selection, constants, policy):
    s = derive_summary(empty_selection, 5000.0, constants, policy)
    assert s.total_pdus == 0
    assert s.even_load_per_pdu_kw == 0.0
    assert s.total_capacity_kw == 0.0


def test_plan_meets_target(five_lineups):
    results = plan(five_lineups, 5000.0)
    assert results.target_met
    assert results.shortfall_kw == pytest.approx(0.0, abs=0.01)
    assert results.allocation_values == pytest.approx([500.0] * 10, abs=0.1)
    assert results.warnings == {}
    assert all(not l.overloaded for l in results.lineups)
    assert results.explain()[0].startswith("Target of 5000.00 kW fully distributed")


def test_plan_reports_shortfall(five_lineups):
    results = plan(five_lineups, 8000.0)
    assert not results.target_met
    assert results.allocated_kw == pytest.approx(10 * PDU_MAX_KW, abs=0.1)
    assert results.shortfall_kw == pytest.approx(8000.0 - 10 * PDU_MAX_KW, abs=0.1)
    assert set(results.warnings) == set(five_lineups.lineups)
    assert all(l.overloaded for l in results.lineups)

    notes = results.explain()
    assert notes[0].startswith("WARNING: Target not fully met")
    assert any(n.startswith("Lineup A01 at policy cap") for n in notes)


def test_plan_empty_selection_is_not_an_error(empty_selection):
    results = plan(empty_selection, 5000.0)
    assert results.allocations == []
    assert results.warnings == {}
    assert results.explain() == ["No PDUs enabled: nothing to distribute"]


def test_plan_rejects_negative_target(five_lineups):
    with pytest.raises(ValueError):
        plan(five_lineups, -1.0)


@pytest.mark.parametrize("target", [float("nan"), float("inf")])
def test_plan_rejects_non_finite_target(five_lineups, target):
    with pytest.raises(ValueError):
        plan(five_lineups, target)


def test_plan_is_stateless(five_lineups):
    first = plan(five_lineups, 8000.0).to_dict()
    plan(five_lineups, 100.0)
    assert plan(five_lineups, 8000.0).to_dict() == first


def test_plan_respects_policy_quantum(five_lineups):
    results = plan(five_lineups, 95.0, policy=DistributionPolicy(quantum_kw=50.0))
    assert results.allocation_values[:3] == pytest.approx([50.0, 45.0, 0.0])


def test_results_dataframe_and_dict(five_lineups):
    results = plan(five_lineups.toggle_subfeed("A01", 0, 0), 1000.0)
    df = results.to_dataframe()
    assert list(df.columns) == [
        "pdu", "lineup", "index", "capacity_kw", "allocated_kw",
        "loading_pct", "headroom_kw", "subfeed_override", "enabled_subfeeds",
    ]
    assert len(df) == 10
    assert df["allocated_kw"].sum() == pytest.approx(1000.0, abs=0.1)
    assert bool(df.loc[0, "subfeed_override"]) is True
    # One subfeed rates A01-1 at 431.28 kW with 100 kW placed
    assert df.loc[0, "headroom_kw"] == pytest.approx(331.28, abs=0.01)

    d = results.to_dict()
    assert d["target_met"] is True
    assert d["summary"]["total_pdus"] == 10
    assert d["allocations"][0]["pdu"] == "A01-1"
    assert any("rated by 1 enabled subfeed" in n for n in d["explanations"])


def test_plan_distribution_from_request():
    request = PlanningRequest.model_validate(
        {
            "name": "Hall1",
            "target_load_mw": 1.9,
            "lineups": [{"name": "C02"}, {"name": "D01", "pdus": [1]}],
        }
    )
    results = plan_distribution(request)
    assert results.name == "Hall1"
    assert results.target_load_kw == pytest.approx(1900.0)
    assert [a.key for a in results.allocations] == ["C02-1", "C02-2", "D01-2"]
    # The last partial pass lands on the first PDU in order
    assert results.allocation_values == pytest.approx([640.0, 630.0, 630.0])
    assert results.target_met


def test_request_validation():
    with pytest.raises(ValidationError):
        PlanningRequest()
    with pytest.raises(ValidationError):
        PlanningRequest(target_load_kw=1.0, target_load_mw=1.0)
    with pytest.raises(ValidationError):
        PlanningRequest(target_load_kw=-5.0)
    with pytest.raises(ValidationError):
        PlanningRequest(target_load_kw=1.0, lineups=[{"name": "A01"}, {"name": "A01"}])
    with pytest.raises(ValidationError):
        LineupSpec(name="A01", subfeeds={0: [8]})
    with pytest.raises(ValidationError):
        ElectricalConstants(power_factor=1.2)
    with pytest.raises(ValidationError):
        ElectricalConstants(pdu_voltage=0)
    with pytest.raises(ValidationError):
        DistributionPolicy(quantum_kw=0)


def test_request_defaults_and_selection():
    request = PlanningRequest.model_validate(
        {"target_load_kw": 10, "lineups": [{"name": "B02", "subfeeds": {"1": [0, 2]}}]}
    )
    sel = request.to_selection()
    assert sel.lineups == ("B02",)
    assert sel.pdu_indices("B02") == (0, 1)
    assert sel.get_pdu("B02", 1).enabled_subfeeds == (0, 2)

    default = PlanningRequest(target_load_mw=5)
    assert default.target_kw == pytest.approx(5000.0)
    assert [l.name for l in default.lineups] == ["A01", "A02", "B01", "B02", "C01"]


def test_check_custom_distribution():
    check = check_custom_distribution([100.004, None, 200.5], 300.0)
    assert check.values_kw == [100.0, 0.0, 200.5]
    assert check.total_kw == pytest.approx(300.5)
    assert check.exceeds_target
    assert check.status == "Exceeds Target Load"

    within = check_custom_distribution([150.0, 150.0], 300.0)
    assert not within.exceeds_target
    assert within.status == "Within Target Load"

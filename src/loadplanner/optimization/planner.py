from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..sizing.capacity import lineup_cap_kw, pdu_capacities, pdu_max_kw, subfeed_max_kw
from ..sizing.models import DistributionPolicy, ElectricalConstants, PlanningRequest
from ..topology.selection import TopologySelection
from .distribution import distribute
from .results import LineupLoading, PduAllocation, PlanResults, PlanSummary

logger = logging.getLogger(__name__)


def derive_summary(
    selection: TopologySelection,
    target_load_kw: float,
    constants: ElectricalConstants,
    policy: DistributionPolicy,
) -> PlanSummary:
    """
    Aggregates recomputed from the snapshot on every request.

    Effective capacity sums each lineup's PDU capacities capped at the
    lineup policy cap; it is the most the engine can ever place.
    """
    cap = lineup_cap_kw(constants, policy)
    total_pdus = selection.total_pdus
    total_capacity = 0.0
    effective = 0.0
    for lineup in selection.selected_lineups():
        lineup_total = sum(pdu_capacities(list(lineup.pdus), constants))
        total_capacity += lineup_total
        effective += min(lineup_total, cap)

    return PlanSummary(
        total_pdus=total_pdus,
        even_load_per_pdu_kw=(float(target_load_kw) / total_pdus) if total_pdus > 0 else 0.0,
        pdu_max_kw=pdu_max_kw(constants),
        subfeed_max_kw=subfeed_max_kw(constants),
        lineup_cap_kw=cap,
        total_capacity_kw=total_capacity,
        effective_capacity_kw=effective,
    )


def plan(
    selection: TopologySelection,
    target_load_kw: float,
    constants: Optional[ElectricalConstants] = None,
    policy: Optional[DistributionPolicy] = None,
    name: str = "LoadPlan",
) -> PlanResults:
    """
    Build a distribution plan for one topology snapshot.

    Each call is independent: nothing computed here is retained.
    """
    if not math.isfinite(target_load_kw) or target_load_kw < 0:
        raise ValueError("target_load_kw must be a finite, non-negative number")
    constants = constants or ElectricalConstants()
    policy = policy or DistributionPolicy()

    summary = derive_summary(selection, target_load_kw, constants, policy)
    pdus = selection.enabled_pdus()
    capacities = pdu_capacities(pdus, constants)

    outcome = distribute(
        pdus,
        target_load_kw,
        capacities,
        lineup_cap_kw=summary.lineup_cap_kw,
        quantum_kw=float(policy.quantum_kw),
    )

    allocations = [
        PduAllocation(
            key=pdu.key,
            lineup=pdu.lineup,
            index=pdu.index,
            capacity_kw=cap,
            allocated_kw=kw,
            subfeed_override=pdu.has_subfeed_override,
            enabled_subfeeds=pdu.enabled_subfeed_count,
        )
        for pdu, cap, kw in zip(pdus, capacities, outcome.allocations)
    ]
    lineups = [
        LineupLoading(
            name=name_,
            used_kw=used,
            cap_kw=summary.lineup_cap_kw,
            overloaded=outcome.warnings.get(name_, False),
        )
        for name_, used in outcome.lineup_usage_kw.items()
    ]

    results = PlanResults(
        name=name,
        target_load_kw=float(target_load_kw),
        summary=summary,
        allocations=allocations,
        lineups=lineups,
        warnings=dict(outcome.warnings),
        passes=outcome.passes,
    )

    logger.info(
        "Plan %s: %.2f / %.2f kW over %d PDUs, %d lineup warning(s)",
        name, results.allocated_kw, results.target_load_kw,
        len(allocations), len(results.warnings),
    )
    if not results.target_met:
        logger.warning(
            "Plan %s short by %.2f kW (effective capacity %.2f kW)",
            name, results.shortfall_kw, summary.effective_capacity_kw,
        )
    return results


def plan_distribution(request: PlanningRequest) -> PlanResults:
    """Planning entry point for a validated request."""
    return plan(
        request.to_selection(),
        request.target_kw,
        constants=request.constants,
        policy=request.policy,
        name=request.name,
    )


@dataclass(frozen=True)
class CustomDistributionCheck:
    """Manually entered per-PDU loads compared with the target."""
    values_kw: List[float]
    total_kw: float
    target_load_kw: float

    @property
    def exceeds_target(self) -> bool:
        return self.total_kw > self.target_load_kw

    @property
    def status(self) -> str:
        return "Exceeds Target Load" if self.exceeds_target else "Within Target Load"


def check_custom_distribution(
    values: Sequence[Optional[float]],
    target_load_kw: float,
) -> CustomDistributionCheck:
    """
    Total a hand-entered distribution.

    Entries are rounded to 2 decimals; missing entries count as 0.
    """
    cleaned = [round(float(v), 2) if v is not None else 0.0 for v in values]
    total = round(sum(cleaned), 2)
    return CustomDistributionCheck(
        values_kw=cleaned, total_kw=total, target_load_kw=float(target_load_kw)
    )

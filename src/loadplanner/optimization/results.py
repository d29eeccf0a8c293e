"""
Plan Results
============

Structured container for a load distribution plan with per-PDU
loading, lineup warnings, shortfall reporting and explanations.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any

import pandas as pd


# Allocations within this margin of the target count as meeting it.
TARGET_TOLERANCE_KW = 0.01


@dataclass
class PduAllocation:
    """Allocation for a single PDU."""
    key: str
    lineup: str
    index: int
    capacity_kw: float
    allocated_kw: float
    subfeed_override: bool = False
    enabled_subfeeds: int = 0

    @property
    def loading_pct(self) -> float:
        if self.capacity_kw <= 0:
            return 0.0
        return (self.allocated_kw / self.capacity_kw) * 100

    @property
    def headroom_kw(self) -> float:
        return self.capacity_kw - self.allocated_kw

    def to_dict(self) -> dict:
        return {
            "pdu": self.key,
            "lineup": self.lineup,
            "index": self.index,
            "capacity_kw": round(self.capacity_kw, 2),
            "allocated_kw": round(self.allocated_kw, 2),
            "loading_pct": round(self.loading_pct, 1),
            "headroom_kw": round(self.headroom_kw, 2),
            "subfeed_override": self.subfeed_override,
            "enabled_subfeeds": self.enabled_subfeeds,
        }


@dataclass
class LineupLoading:
    """Aggregate load on a lineup against its policy cap."""
    name: str
    used_kw: float
    cap_kw: float
    overloaded: bool = False

    @property
    def loading_pct(self) -> float:
        return (self.used_kw / self.cap_kw) * 100 if self.cap_kw > 0 else 0.0


@dataclass
class PlanSummary:
    """Aggregates derived from the topology snapshot before distribution."""
    total_pdus: int
    even_load_per_pdu_kw: float
    pdu_max_kw: float
    subfeed_max_kw: float
    lineup_cap_kw: float
    total_capacity_kw: float
    effective_capacity_kw: float

    @property
    def total_capacity_mw(self) -> float:
        return self.total_capacity_kw / 1000.0

    def to_dict(self) -> dict:
        return {
            "total_pdus": self.total_pdus,
            "even_load_per_pdu_kw": round(self.even_load_per_pdu_kw, 2),
            "pdu_max_kw": round(self.pdu_max_kw, 2),
            "subfeed_max_kw": round(self.subfeed_max_kw, 2),
            "lineup_cap_kw": round(self.lineup_cap_kw, 2),
            "total_capacity_mw": round(self.total_capacity_mw, 2),
            "effective_capacity_kw": round(self.effective_capacity_kw, 2),
        }


@dataclass
class PlanResults:
    """
    Complete distribution plan.

    Contains:
    - Per-PDU allocations in distribution order
    - Lineup loading and overload warnings
    - Derived topology summary
    - Shortfall against the requested target

    A plan that cannot place the full target is still a valid plan;
    check target_met / shortfall_kw before acting on it.
    """
    name: str
    target_load_kw: float
    summary: PlanSummary
    allocations: List[PduAllocation] = field(default_factory=list)
    lineups: List[LineupLoading] = field(default_factory=list)
    warnings: Dict[str, bool] = field(default_factory=dict)
    passes: int = 0

    @property
    def allocated_kw(self) -> float:
        return float(sum(a.allocated_kw for a in self.allocations))

    @property
    def shortfall_kw(self) -> float:
        return max(0.0, self.target_load_kw - self.allocated_kw)

    @property
    def target_met(self) -> bool:
        return self.shortfall_kw <= TARGET_TOLERANCE_KW

    @property
    def allocation_values(self) -> List[float]:
        return [a.allocated_kw for a in self.allocations]

    def explain(self) -> List[str]:
        """Human-readable notes on the plan outcome."""
        notes = []
        if not self.allocations:
            notes.append("No PDUs enabled: nothing to distribute")
            return notes

        if self.target_met:
            notes.append(
                f"Target of {self.target_load_kw:.2f} kW fully distributed "
                f"across {len(self.allocations)} PDUs"
            )
        else:
            notes.append(
                f"WARNING: Target not fully met: {self.allocated_kw:.2f} of "
                f"{self.target_load_kw:.2f} kW placed, {self.shortfall_kw:.2f} kW short"
            )

        for lineup in self.lineups:
            if lineup.overloaded:
                notes.append(
                    f"Lineup {lineup.name} at policy cap: "
                    f"{lineup.used_kw:.2f} / {lineup.cap_kw:.2f} kW"
                )

        for a in self.allocations:
            if a.capacity_kw <= 0:
                notes.append(f"PDU {a.key} has no capacity and was skipped")
            elif a.subfeed_override:
                notes.append(
                    f"PDU {a.key} rated by {a.enabled_subfeeds} enabled subfeed(s): "
                    f"{a.capacity_kw:.2f} kW"
                )
        return notes

    def to_dataframe(self) -> pd.DataFrame:
        """Per-PDU allocation table."""
        columns = [
            "pdu", "lineup", "index", "capacity_kw", "allocated_kw",
            "loading_pct", "headroom_kw", "subfeed_override", "enabled_subfeeds",
        ]
        return pd.DataFrame([a.to_dict() for a in self.allocations], columns=columns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "target_load_kw": self.target_load_kw,
            "allocated_kw": round(self.allocated_kw, 2),
            "shortfall_kw": round(self.shortfall_kw, 2),
            "target_met": self.target_met,
            "passes": self.passes,
            "summary": self.summary.to_dict(),
            "allocations": [a.to_dict() for a in self.allocations],
            "lineups": [
                {
                    "name": l.name,
                    "used_kw": round(l.used_kw, 2),
                    "cap_kw": round(l.cap_kw, 2),
                    "loading_pct": round(l.loading_pct, 1),
                    "overloaded": l.overloaded,
                }
                for l in self.lineups
            ],
            "warnings": dict(self.warnings),
            "explanations": self.explain(),
        }

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, PositiveFloat, confloat, conint, model_validator

from ..topology.lineup import DEFAULT_PDU_INDICES
from ..topology.pdu import SUBFEEDS_PER_PDU
from ..topology.selection import DEFAULT_SELECTED_LINEUPS, TopologySelection


class ElectricalConstants(BaseModel):
    subfeed_breaker_amps: PositiveFloat = Field(600.0, description="Subfeed breaker rating (A).")
    subfeed_voltage: PositiveFloat = Field(415.0, description="Subfeed line-to-line voltage (V).")
    pdu_breaker_amps: PositiveFloat = Field(996.0, description="PDU main breaker rating (A).")
    pdu_voltage: PositiveFloat = Field(480.0, description="PDU line-to-line voltage (V).")
    power_factor: confloat(gt=0, le=1) = Field(1.0, description="Load power factor.")
    derating_factor: confloat(gt=0, le=1) = Field(
        0.8, description="Continuous-load derating applied to the PDU main breaker."
    )

    model_config = {"frozen": True}


class DistributionPolicy(BaseModel):
    quantum_kw: PositiveFloat = Field(
        10.0, description="Maximum kW assigned to one PDU in a single distribution pass."
    )
    lineup_cap_multiplier: PositiveFloat = Field(
        2.0,
        description=(
            "Lineup cap as a multiple of nominal PDU max kW. Applied per lineup "
            "regardless of how many PDUs it has enabled."
        ),
    )

    model_config = {"frozen": True}


class LineupSpec(BaseModel):
    name: str = Field(..., min_length=1, description="Lineup identifier (e.g. 'A01').")
    pdus: List[conint(ge=0)] = Field(
        default_factory=lambda: list(DEFAULT_PDU_INDICES),
        description="Enabled PDU indices (zero-based).",
    )
    subfeeds: Dict[conint(ge=0), List[conint(ge=0, lt=SUBFEEDS_PER_PDU)]] = Field(
        default_factory=dict,
        description="Enabled subfeed breaker indices keyed by PDU index.",
    )


class PlanningRequest(BaseModel):
    name: str = Field("LoadPlan", description="Plan name.")
    target_load_kw: Optional[confloat(ge=0)] = Field(None, description="Target total load (kW).")
    target_load_mw: Optional[confloat(ge=0)] = Field(None, description="Target total load (MW).")

    lineups: List[LineupSpec] = Field(
        default_factory=lambda: [LineupSpec(name=n) for n in DEFAULT_SELECTED_LINEUPS],
        description="Selected lineups in distribution order.",
    )
    constants: ElectricalConstants = Field(default_factory=ElectricalConstants)
    policy: DistributionPolicy = Field(default_factory=DistributionPolicy)

    @model_validator(mode="after")
    def _check_request(self) -> "PlanningRequest":
        if (self.target_load_kw is None) == (self.target_load_mw is None):
            raise ValueError("exactly one of target_load_kw or target_load_mw must be given")
        names = [l.name for l in self.lineups]
        if len(set(names)) != len(names):
            raise ValueError("lineup names must be unique")
        return self

    @property
    def target_kw(self) -> float:
        if self.target_load_kw is not None:
            return float(self.target_load_kw)
        return float(self.target_load_mw) * 1000.0

    def to_selection(self) -> TopologySelection:
        return TopologySelection(
            lineups=tuple(l.name for l in self.lineups),
            pdu_usage={l.name: tuple(l.pdus) for l in self.lineups},
            subfeeds={
                (l.name, pdu_index): tuple(feeds)
                for l in self.lineups
                for pdu_index, feeds in l.subfeeds.items()
            },
        )

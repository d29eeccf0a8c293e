from __future__ import annotations

import math
from typing import Dict, List

from ..topology.pdu import PDU
from .models import ElectricalConstants, DistributionPolicy


def _three_phase_kw(voltage: float, amps: float, power_factor: float) -> float:
    return math.sqrt(3) * float(voltage) * float(amps) * float(power_factor) / 1000.0


def subfeed_max_kw(constants: ElectricalConstants) -> float:
    """Maximum sustained real power of one subfeed breaker (kW)."""
    return _three_phase_kw(
        constants.subfeed_voltage, constants.subfeed_breaker_amps, constants.power_factor
    )


def pdu_max_kw(constants: ElectricalConstants) -> float:
    """Nominal PDU rating (kW): main breaker with derating applied."""
    return _three_phase_kw(
        constants.pdu_voltage, constants.pdu_breaker_amps, constants.power_factor
    ) * float(constants.derating_factor)


def pdu_capacity(pdu: PDU, constants: ElectricalConstants) -> float:
    """
    Capacity of a single PDU (kW).

    Enabled subfeed breakers replace the nominal rating entirely:
    k enabled subfeeds give k * subfeed_max_kw, otherwise the PDU
    is rated at pdu_max_kw.
    """
    if pdu.has_subfeed_override:
        return pdu.enabled_subfeed_count * subfeed_max_kw(constants)
    return pdu_max_kw(constants)


def pdu_capacities(pdus: List[PDU], constants: ElectricalConstants) -> List[float]:
    return [pdu_capacity(p, constants) for p in pdus]


def lineup_cap_kw(constants: ElectricalConstants, policy: DistributionPolicy) -> float:
    """Per-lineup policy cap: a fixed multiple of the nominal PDU rating."""
    return float(policy.lineup_cap_multiplier) * pdu_max_kw(constants)


def capacity_summary(constants: ElectricalConstants) -> Dict[str, float]:
    return {
        "subfeed_max_kw": subfeed_max_kw(constants),
        "pdu_max_kw": pdu_max_kw(constants),
    }

"""
Sizing / configuration toolchain.

This package converts breaker and voltage ratings into per-unit kW
capacity and defines the validated request models used to configure
a planning run.
"""

from .models import ElectricalConstants, DistributionPolicy, LineupSpec, PlanningRequest
from .capacity import subfeed_max_kw, pdu_max_kw, pdu_capacity, capacity_summary

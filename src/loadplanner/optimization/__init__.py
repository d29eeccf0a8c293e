"""
Optimization Module
===================

Greedy load distribution across enabled PDUs:
- Quantum-bounded round robin with per-PDU and per-lineup limits
- Lineup overload warnings
- Shortfall reporting and plan explanations
"""

from .distribution import distribute, DistributionOutcome, DEFAULT_QUANTUM_KW
from .planner import plan, plan_distribution, derive_summary, check_custom_distribution
from .results import PlanResults, PduAllocation, LineupLoading, PlanSummary

__all__ = [
    "distribute",
    "DistributionOutcome",
    "DEFAULT_QUANTUM_KW",
    "plan",
    "plan_distribution",
    "derive_summary",
    "check_custom_distribution",
    "PlanResults",
    "PduAllocation",
    "LineupLoading",
    "PlanSummary",
]

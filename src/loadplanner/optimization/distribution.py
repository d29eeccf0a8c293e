"""
Distribution Engine
===================

Round-robin greedy allocation of a target load across enabled PDUs.

Each pass visits the PDUs in list order and gives each one at most
one quantum of load, bounded by the PDU's remaining capacity and by
its lineup's remaining policy headroom. Passes repeat until the load
is fully assigned or a whole pass assigns nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from ..topology.pdu import PDU

logger = logging.getLogger(__name__)


DEFAULT_QUANTUM_KW = 10.0

# Float accumulation of quanta can land a hair below a cap.
CAP_TOLERANCE_KW = 1e-6


@dataclass(frozen=True)
class DistributionOutcome:
    """
    Raw output of one engine run.

    Attributes:
        allocations: kW per PDU, index-aligned with the input list
        warnings: Lineups whose usage reached the policy cap
        lineup_usage_kw: Accumulated kW per lineup
        remaining_kw: Load left unassigned when the engine stopped
        passes: Number of passes executed
    """
    allocations: List[float]
    warnings: Dict[str, bool] = field(default_factory=dict)
    lineup_usage_kw: Dict[str, float] = field(default_factory=dict)
    remaining_kw: float = 0.0
    passes: int = 0

    @property
    def allocated_kw(self) -> float:
        return float(sum(self.allocations))


def distribute(
    pdus: Sequence[PDU],
    target_load_kw: float,
    capacities: Sequence[float],
    lineup_cap_kw: float,
    quantum_kw: float = DEFAULT_QUANTUM_KW,
) -> DistributionOutcome:
    """
    Distribute a target load across PDUs.

    Args:
        pdus: Ordered PDUs to allocate across; order is the tie-break order
        target_load_kw: Total load to place (kW)
        capacities: Precomputed capacity per PDU (kW), same order as pdus
        lineup_cap_kw: Aggregate cap applied to every lineup (kW)
        quantum_kw: Maximum kW given to one PDU per pass

    Returns:
        DistributionOutcome. A shortfall is not an error: callers compare
        allocated_kw with the target (or read remaining_kw) to detect it.
    """
    if len(capacities) != len(pdus):
        raise ValueError("capacities must be index-aligned with pdus")
    identities = [p.identity for p in pdus]
    if len(set(identities)) != len(identities):
        raise ValueError("duplicate PDU in distribution list")
    if quantum_kw <= 0:
        raise ValueError("quantum_kw must be positive")

    n = len(pdus)
    distributed = np.zeros(n, dtype=float)
    lineup_used: Dict[str, float] = {}
    for pdu in pdus:
        lineup_used.setdefault(pdu.lineup, 0.0)

    remaining = max(0.0, float(target_load_kw))
    lineup_cap = float(lineup_cap_kw)
    passes = 0

    while remaining > 0 and n > 0:
        passes += 1
        any_allocated = False
        for i, pdu in enumerate(pdus):
            cap = float(capacities[i])
            if cap <= 0:
                continue
            usage = lineup_used[pdu.lineup]
            if usage >= lineup_cap - CAP_TOLERANCE_KW:
                continue
            available = min(cap - float(distributed[i]), lineup_cap - usage)
            if available <= CAP_TOLERANCE_KW:
                continue
            to_assign = min(available, remaining, quantum_kw)
            distributed[i] += to_assign
            lineup_used[pdu.lineup] = usage + to_assign
            remaining -= to_assign
            any_allocated = True
            if remaining <= 0:
                break
        if not any_allocated:
            logger.debug("Pass %d assigned nothing; %.2f kW unassignable", passes, remaining)
            break

    warnings = {
        lineup: True
        for lineup, used in lineup_used.items()
        if used >= lineup_cap - CAP_TOLERANCE_KW
    }
    remaining = max(0.0, remaining)

    logger.debug(
        "Distributed %.2f kW over %d PDUs in %d passes (%.2f kW remaining)",
        float(distributed.sum()), n, passes, remaining,
    )
    for lineup in warnings:
        logger.warning("Lineup %s reached its policy cap of %.2f kW", lineup, lineup_cap)

    return DistributionOutcome(
        allocations=distributed.tolist(),
        warnings=warnings,
        lineup_usage_kw=lineup_used,
        remaining_kw=remaining,
        passes=passes,
    )

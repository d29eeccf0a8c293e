"""
Topology Layer
==============

Power delivery hierarchy of a data hall:
- Lineups grouping PDUs under a shared policy cap
- PDUs with a main breaker rating
- Subfeed breakers that override PDU capacity when enabled
- Immutable selection snapshots with pure toggle operations
"""

from .pdu import PDU, SubfeedBreaker
from .lineup import Lineup
from .selection import TopologySelection, default_selection

__all__ = ["PDU", "SubfeedBreaker", "Lineup", "TopologySelection", "default_selection"]

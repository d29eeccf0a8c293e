"""
Lineup Model
============

A lineup groups PDUs that share one aggregate policy cap.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .pdu import PDU


DEFAULT_PDU_INDICES: Tuple[int, ...] = (0, 1)


@dataclass(frozen=True)
class Lineup:
    """
    Lineup of PDUs.

    Attributes:
        name: Lineup identifier (e.g. 'A01')
        pdus: Enabled PDUs in ascending index order
    """
    name: str
    pdus: Tuple[PDU, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate PDU membership and order."""
        if not self.name:
            raise ValueError("lineup name must be non-empty")
        seen = set()
        for pdu in self.pdus:
            if pdu.lineup != self.name:
                raise ValueError(f"PDU {pdu.key} does not belong to lineup {self.name}")
            if pdu.index in seen:
                raise ValueError(f"duplicate PDU index {pdu.index} in lineup {self.name}")
            seen.add(pdu.index)
        object.__setattr__(self, "pdus", tuple(sorted(self.pdus, key=lambda p: p.index)))

    @property
    def pdu_indices(self) -> Tuple[int, ...]:
        return tuple(p.index for p in self.pdus)

    def pdu_keys(self) -> List[str]:
        return [p.key for p in self.pdus]

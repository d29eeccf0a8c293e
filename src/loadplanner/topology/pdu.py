"""
PDU Model
=========

Power Distribution Units and their subfeed breakers.
A PDU belongs to exactly one lineup and feeds up to eight subfeeds.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


SUBFEEDS_PER_PDU = 8


@dataclass(frozen=True)
class SubfeedBreaker:
    """
    Subfeed breaker under a PDU.

    Attributes:
        pdu_key: Key of the owning PDU (e.g. 'A01-1')
        index: Breaker position on the PDU (0..7)
        enabled: Whether the breaker contributes capacity
    """
    pdu_key: str
    index: int
    enabled: bool = False

    def __post_init__(self):
        """Validate breaker position."""
        if not (0 <= self.index < SUBFEEDS_PER_PDU):
            raise ValueError(f"subfeed index must be in [0, {SUBFEEDS_PER_PDU - 1}]")

    @property
    def key(self) -> str:
        """Display key, e.g. 'A01-1-S3'."""
        return f"{self.pdu_key}-S{self.index}"


@dataclass(frozen=True)
class PDU:
    """
    Power Distribution Unit within a lineup.

    Capacity is the nominal main-breaker rating unless one or more
    subfeed breakers are individually enabled, in which case the
    enabled subfeeds replace the nominal rating.

    Attributes:
        lineup: Owning lineup identifier
        index: Zero-based PDU position within the lineup
        enabled_subfeeds: Sorted indices of enabled subfeed breakers
    """
    lineup: str
    index: int
    enabled_subfeeds: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate and normalize subfeed indices."""
        if not self.lineup:
            raise ValueError("lineup must be a non-empty identifier")
        if self.index < 0:
            raise ValueError("PDU index must be non-negative")
        for s in self.enabled_subfeeds:
            if not (0 <= s < SUBFEEDS_PER_PDU):
                raise ValueError(f"subfeed index must be in [0, {SUBFEEDS_PER_PDU - 1}]")
        object.__setattr__(self, "enabled_subfeeds", tuple(sorted(set(self.enabled_subfeeds))))

    @property
    def key(self) -> str:
        """Display key, one-based: lineup 'A01' index 0 -> 'A01-1'."""
        return f"{self.lineup}-{self.index + 1}"

    @property
    def identity(self) -> Tuple[str, int]:
        return (self.lineup, self.index)

    @property
    def enabled_subfeed_count(self) -> int:
        return len(self.enabled_subfeeds)

    @property
    def has_subfeed_override(self) -> bool:
        """True when subfeed-level capacity replaces the nominal rating."""
        return self.enabled_subfeed_count > 0

    def subfeeds(self) -> List[SubfeedBreaker]:
        """All breaker positions on this PDU with their state."""
        return [
            SubfeedBreaker(pdu_key=self.key, index=i, enabled=i in self.enabled_subfeeds)
            for i in range(SUBFEEDS_PER_PDU)
        ]

    def with_subfeed_toggled(self, index: int) -> "PDU":
        """Return a copy with one subfeed breaker flipped."""
        if not (0 <= index < SUBFEEDS_PER_PDU):
            raise ValueError(f"subfeed index must be in [0, {SUBFEEDS_PER_PDU - 1}]")
        current = set(self.enabled_subfeeds)
        if index in current:
            current.remove(index)
        else:
            current.add(index)
        return PDU(lineup=self.lineup, index=self.index, enabled_subfeeds=tuple(current))

"""
Topology Selection
==================

Immutable snapshot of which lineups, PDUs and subfeed breakers are
enabled for a planning request. Toggle operations return a new
snapshot and never modify the receiver.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from .lineup import DEFAULT_PDU_INDICES, Lineup
from .pdu import PDU, SUBFEEDS_PER_PDU


LINEUP_NAMES: Tuple[str, ...] = (
    "A01", "A02", "B01", "B02", "C01", "C02", "D01", "D02", "E01", "E02",
)
DEFAULT_SELECTED_LINEUPS: Tuple[str, ...] = ("A01", "A02", "B01", "B02", "C01")


@dataclass(frozen=True)
class TopologySelection:
    """
    Snapshot of the enabled distribution topology.

    Attributes:
        lineups: Selected lineup identifiers, in selection order
        pdu_usage: Explicit enabled PDU indices per lineup; lineups
                   without an entry use the default {0, 1}
        subfeeds: Enabled subfeed indices keyed by (lineup, PDU index)
    """
    lineups: Tuple[str, ...] = field(default_factory=tuple)
    pdu_usage: Dict[str, Tuple[int, ...]] = field(default_factory=dict)
    subfeeds: Dict[Tuple[str, int], Tuple[int, ...]] = field(default_factory=dict)

    def __post_init__(self):
        """Validate and normalize the snapshot."""
        lineups = tuple(self.lineups)
        if len(set(lineups)) != len(lineups):
            raise ValueError("duplicate lineup in selection")

        usage = {}
        for name, indices in self.pdu_usage.items():
            indices = tuple(sorted(set(indices)))
            if any(i < 0 for i in indices):
                raise ValueError(f"PDU indices for {name} must be non-negative")
            usage[name] = indices

        feeds = {}
        for (name, pdu_index), indices in self.subfeeds.items():
            indices = tuple(sorted(set(indices)))
            if any(not (0 <= i < SUBFEEDS_PER_PDU) for i in indices):
                raise ValueError(f"subfeed index must be in [0, {SUBFEEDS_PER_PDU - 1}]")
            if indices:
                feeds[(name, pdu_index)] = indices

        object.__setattr__(self, "lineups", lineups)
        object.__setattr__(self, "pdu_usage", usage)
        object.__setattr__(self, "subfeeds", feeds)

    def pdu_indices(self, lineup: str) -> Tuple[int, ...]:
        """Enabled PDU indices of a lineup, ascending."""
        return self.pdu_usage.get(lineup, DEFAULT_PDU_INDICES)

    def lineup(self, name: str) -> Lineup:
        """Build the Lineup view for one lineup of this snapshot."""
        pdus = tuple(
            PDU(lineup=name, index=i, enabled_subfeeds=self.subfeeds.get((name, i), ()))
            for i in self.pdu_indices(name)
        )
        return Lineup(name=name, pdus=pdus)

    def selected_lineups(self) -> List[Lineup]:
        return [self.lineup(name) for name in self.lineups]

    def enabled_pdus(self) -> List[PDU]:
        """
        Ordered PDU list for distribution.

        Lineups in selection order, PDUs in ascending index order
        within each lineup.
        """
        return [pdu for lineup in self.selected_lineups() for pdu in lineup.pdus]

    @property
    def total_pdus(self) -> int:
        return sum(len(self.pdu_indices(name)) for name in self.lineups)

    def get_pdu(self, lineup: str, index: int) -> Optional[PDU]:
        for pdu in self.lineup(lineup).pdus:
            if pdu.index == index:
                return pdu
        return None

    def toggle_lineup(self, lineup: str) -> "TopologySelection":
        """Deselect a selected lineup, or append an unselected one."""
        if lineup in self.lineups:
            lineups = tuple(name for name in self.lineups if name != lineup)
        else:
            lineups = self.lineups + (lineup,)
        return replace(self, lineups=lineups)

    def toggle_pdu(self, lineup: str, index: int) -> "TopologySelection":
        """Flip one PDU of a lineup; the index set stays sorted."""
        current = set(self.pdu_indices(lineup))
        if index in current:
            current.remove(index)
        else:
            current.add(index)
        usage = dict(self.pdu_usage)
        usage[lineup] = tuple(sorted(current))
        return replace(self, pdu_usage=usage)

    def toggle_subfeed(self, lineup: str, pdu_index: int, subfeed_index: int) -> "TopologySelection":
        """Flip one subfeed breaker of a PDU."""
        pdu = PDU(
            lineup=lineup,
            index=pdu_index,
            enabled_subfeeds=self.subfeeds.get((lineup, pdu_index), ()),
        ).with_subfeed_toggled(subfeed_index)
        feeds = dict(self.subfeeds)
        feeds[(lineup, pdu_index)] = pdu.enabled_subfeeds
        return replace(self, subfeeds=feeds)

    def clear(self) -> "TopologySelection":
        """Empty selection: no lineups, no PDU overrides, no subfeeds."""
        return TopologySelection()


def default_selection() -> TopologySelection:
    """
    Default planning topology.

    Five of the ten hall lineups selected, each with both PDUs
    enabled and no subfeed overrides.
    """
    return TopologySelection(lineups=DEFAULT_SELECTED_LINEUPS)

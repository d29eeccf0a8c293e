"""
Load Distribution Planner
=========================

Planning tool for data-center power distribution:
- Lineups, PDUs and subfeed breakers as an immutable topology snapshot
- Capacity model deriving per-unit kW from breaker and voltage ratings
- Quantum-bounded round-robin distribution of a target load
- Lineup overload warnings and under-capacity reporting

Architecture:
- topology/: Lineup / PDU / subfeed selection model
- sizing/: Electrical ratings, request models, capacity model, CLI
- optimization/: Distribution engine, planner and results
"""

__version__ = "1.0.0"

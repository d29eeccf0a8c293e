from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..optimization.planner import plan_distribution
from .capacity import capacity_summary
from .models import PlanningRequest


def load_request(path: str | None, *, target_mw: float | None) -> Any:
    data: Any = {}
    if path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Request JSON not found: {path}")
        data = json.loads(p.read_text())

    if not isinstance(data, dict):
        return data

    if target_mw is not None:
        data.pop("target_load_kw", None)
        data["target_load_mw"] = target_mw
    elif "target_load_kw" not in data and "target_load_mw" not in data:
        # Planner default of 5 MW
        data["target_load_mw"] = 5.0
    return data


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Distribute a target load across data-center lineups, PDUs and subfeeds."
    )
    parser.add_argument(
        "--input",
        "-i",
        help="Path to planning request JSON. If omitted, the default five-lineup topology is used.",
    )
    parser.add_argument(
        "--target-mw",
        type=float,
        help="Target load (MW). Overrides the target in the request file.",
    )
    parser.add_argument(
        "--output",
        "-o",
        default="load_plan.json",
        help="Path to write the plan JSON.",
    )
    parser.add_argument(
        "--csv",
        help="Optional path to write the per-PDU allocation table as CSV.",
    )
    parser.add_argument(
        "--capacity-only",
        action="store_true",
        help="Print the per-subfeed and per-PDU ratings and exit.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.target_mw is not None and args.target_mw < 0:
        print("Input error: --target-mw must be non-negative", file=sys.stderr)
        return 2

    try:
        raw = load_request(args.input, target_mw=args.target_mw)
        request = PlanningRequest.model_validate(raw)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Input error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print("Input validation error:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    if args.capacity_only:
        caps = capacity_summary(request.constants)
        print(f"Max capacity per subfeed: {caps['subfeed_max_kw']:.2f} kW")
        print(f"Max capacity per PDU: {caps['pdu_max_kw']:.2f} kW")
        return 0

    out = plan_distribution(request)

    Path(args.output).write_text(json.dumps(out.to_dict(), indent=2))
    if args.csv:
        out.to_dataframe().to_csv(args.csv, index=False)

    # Minimal console summary
    s = out.summary
    print(f"Total PDUs in use: {s.total_pdus}")
    print(f"Required even load per PDU: {s.even_load_per_pdu_kw:.2f} kW")
    print(f"Max capacity per selected PDU: {s.pdu_max_kw:.2f} kW")
    print(f"Total available system capacity: {s.total_capacity_mw:.2f} MW")
    print(f"Distributed: {out.allocated_kw:.2f} kW of {out.target_load_kw:.2f} kW")
    for a in out.allocations:
        print(f"  {a.key}: {a.allocated_kw:.2f} kW ({a.loading_pct:.1f}% of {a.capacity_kw:.2f} kW)")
    if out.warnings:
        print("\nOverloaded lineups:", file=sys.stderr)
        for lineup in out.warnings:
            print(f"- {lineup}", file=sys.stderr)
    if not out.target_met:
        print(f"\nTarget not fully met: {out.shortfall_kw:.2f} kW unallocated", file=sys.stderr)

    return 0 if out.target_met else 1


if __name__ == "__main__":
    raise SystemExit(main())

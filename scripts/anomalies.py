#!/usr/bin/env python3
"""List, show or acknowledge anomalies against the live tables.

Runs the anomaly service as a given user, printing the records as
JSON.  Useful for checking table contents and ownership rows during
development.

Usage
-----
Set environment variables and run::

    export VEHICLE_ANOMALY_TBL="vehicle-anomaly"
    export VEHICLE_OWNER_TBL="vehicle-owner"
    export AWS_REGION="us-east-1"
    python scripts/anomalies.py --user alice --vin VIN123

Options::

    --user NAME          Username to act as (required)
    --vin VIN            Vehicle to query (required)
    --anomaly ID         Show a single anomaly instead of listing
    --ack                Acknowledge the anomaly given by --anomaly
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetanomaly import AnomalyService, FleetConfig, FleetError  # noqa: E402


async def run(args: argparse.Namespace) -> Any:
    config = FleetConfig.from_env()
    ticket = {config.identity_claim: args.user}

    async with AnomalyService.from_config(config) as service:
        if args.anomaly is None:
            records = await service.list_anomalies_by_vehicle(ticket, args.vin)
            return [record.to_item() for record in records]
        if args.ack:
            record = await service.acknowledge_vehicle_anomaly(ticket, args.vin, args.anomaly)
        else:
            record = await service.get_vehicle_anomaly(ticket, args.vin, args.anomaly)
        return record.to_item()


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Inspect vehicle anomalies through the anomaly service.",
    )
    parser.add_argument("--user", required=True, help="Username to act as")
    parser.add_argument("--vin", required=True, help="Vehicle to query")
    parser.add_argument("--anomaly", help="Show a single anomaly instead of listing")
    parser.add_argument("--ack", action="store_true", help="Acknowledge the anomaly given by --anomaly")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.ack and args.anomaly is None:
        parser.error("--ack requires --anomaly")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        result = asyncio.run(run(args))
    except FleetError as exc:
        print(json.dumps(exc.to_payload(), indent=2), file=sys.stderr)
        return 1

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())

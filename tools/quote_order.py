#!/usr/bin/env python3
"""
Resolve a signed order off-chain and print the amounts a fill would move.

Input file: {"order": {...}, "signature": "0x..."}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fillreactor.core.context import ExecutionContext
from fillreactor.core.errors import ReactorError
from fillreactor.core.signatures import Secp256k1Recoverer
from fillreactor.integration.config import ReactorConfig, load_config
from fillreactor.integration.reactor import SettlementEngine
from fillreactor.integration.transfers import InMemoryTokenLedger
from fillreactor.state.nonces import NonceStore
from fillreactor.state.orders import SignedOrder


logger = logging.getLogger("quote_order")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quote a signed order without settling it")
    parser.add_argument("order_file", help="Signed order JSON file")
    parser.add_argument("--config", help="Reactor config YAML (defaults to FILLREACTOR_* env vars)")
    parser.add_argument("--caller", required=True, help="Filler identity (0x + 40 hex)")
    parser.add_argument("--timestamp", type=int, default=None, help="Current time (default: now)")
    parser.add_argument("--block", type=int, default=0, help="Current block number")
    parser.add_argument("--base-fee", type=int, default=0, help="Current base fee (wei)")
    parser.add_argument("--gas-price", type=int, default=0, help="Caller gas price (wei)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config) if args.config else ReactorConfig.from_env()
    except (OSError, ValueError, TypeError) as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 2

    try:
        raw = json.loads(Path(args.order_file).read_text(encoding="utf-8"))
        signed = SignedOrder.from_dict(raw)
    except (OSError, ValueError, TypeError) as exc:
        print(f"invalid order file: {exc}", file=sys.stderr)
        return 2

    recoverer = Secp256k1Recoverer()
    engine = SettlementEngine(
        config=config,
        transfers=InMemoryTokenLedger(chain_id=config.chain_id, recoverer=recoverer),
        nonces=NonceStore(),
        recoverer=recoverer,
    )
    try:
        ctx = ExecutionContext(
            caller=args.caller,
            timestamp=int(time.time()) if args.timestamp is None else args.timestamp,
            block_number=args.block,
            base_fee=args.base_fee,
            gas_price=args.gas_price,
        )
    except (ValueError, TypeError) as exc:
        print(f"invalid context: {exc}", file=sys.stderr)
        return 2
    logger.debug("quoting %s at %s", args.order_file, ctx)

    try:
        resolved = engine.quote(signed, ctx)
    except ReactorError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(resolved.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

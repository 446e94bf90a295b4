from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from aggregator import config, engine
from aggregator.errors import InvalidRequest, QuoteError
from aggregator.fees import calc_platform_fee
from aggregator.logs import configure_logging
from aggregator.validation import (
    parse_cross_chain_request,
    parse_flash_loan_request,
    parse_quote_request,
)
from infra.metrics import METRICS

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quote-aggregator", description="Multi-source quote aggregator")
    parser.add_argument("--log-level", default="WARNING", help="log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", type=str, default="", help="also write logs to this file")
    parser.add_argument("--metrics", action="store_true", help="print a metrics snapshot to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    q = sub.add_parser("quote", help="best single-chain swap quote")
    q.add_argument("--from-token", required=True, help="address or known symbol")
    q.add_argument("--to-token", required=True, help="address or known symbol")
    q.add_argument("--amount", required=True, help="input amount in base units")
    q.add_argument("--chain-id", required=True)
    q.add_argument("--slippage", default=None)
    q.add_argument("--aggregators", default=None, help="comma-separated provider names")

    x = sub.add_parser("cross-chain", help="best cross-chain route")
    x.add_argument("--from-chain-id", required=True)
    x.add_argument("--to-chain-id", required=True)
    x.add_argument("--from-token", required=True)
    x.add_argument("--to-token", required=True)
    x.add_argument("--amount", required=True)
    x.add_argument("--from-address", required=True)
    x.add_argument("--to-address", default=None)
    x.add_argument("--slippage", default=None)
    x.add_argument("--aggregators", default=None, help="comma-separated provider names")

    f = sub.add_parser("flashloan", help="cheapest flash loan with enough liquidity")
    f.add_argument("--asset", required=True)
    f.add_argument("--amount", required=True)
    f.add_argument("--chain-id", required=True)
    f.add_argument("--target-contract", required=True)
    f.add_argument("--params", default="0x")
    f.add_argument("--provider", default=None)

    p = sub.add_parser("fee", help="platform fee for an amount")
    p.add_argument("--amount", required=True)
    p.add_argument("--bps", type=int, default=None, help="override PLATFORM_FEE_BPS")
    p.add_argument("--recipient", default=None)
    return parser


def _payload(args: argparse.Namespace) -> Dict[str, Any]:
    if args.command == "quote":
        return {
            "fromToken": args.from_token,
            "toToken": args.to_token,
            "amount": args.amount,
            "chainId": args.chain_id,
            "slippage": args.slippage,
            "aggregators": args.aggregators,
        }
    if args.command == "cross-chain":
        return {
            "fromChainId": args.from_chain_id,
            "toChainId": args.to_chain_id,
            "fromToken": args.from_token,
            "toToken": args.to_token,
            "amount": args.amount,
            "fromAddress": args.from_address,
            "toAddress": args.to_address,
            "slippage": args.slippage,
            "aggregators": args.aggregators,
        }
    return {
        "asset": args.asset,
        "amount": args.amount,
        "chainId": args.chain_id,
        "targetContract": args.target_contract,
        "params": args.params,
        "provider": args.provider,
    }


async def _run(args: argparse.Namespace) -> Dict[str, Any]:
    try:
        if args.command == "quote":
            best = await engine.get_quotes(parse_quote_request(_payload(args)))
        elif args.command == "cross-chain":
            best = await engine.get_cross_chain_quotes(parse_cross_chain_request(_payload(args)))
        else:
            best = await engine.get_flash_loan_quotes(parse_flash_loan_request(_payload(args)))
        return best.to_dict()
    finally:
        await engine.close_providers()


def _fee(args: argparse.Namespace) -> Dict[str, Any]:
    bps = args.bps if args.bps is not None else config.platform_fee_bps()
    recipient = args.recipient if args.recipient is not None else config.platform_fee_recipient()
    try:
        return calc_platform_fee(args.amount, bps, recipient).to_dict()
    except ValueError as e:
        raise InvalidRequest(str(e)) from e


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level, Path(args.log_file) if args.log_file else None)

    for warning in config.validate_config():
        logger.warning("[config] %s: %s", warning.key, warning.message)

    exit_code = 0
    try:
        if args.command == "fee":
            out = _fee(args)
        else:
            out = asyncio.run(_run(args))
        print(json.dumps(out, indent=2))
    except InvalidRequest as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        exit_code = 2
    except QuoteError as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        exit_code = 1

    if args.metrics:
        print(json.dumps(METRICS.snapshot(), indent=2), file=sys.stderr)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())

"""
liquidity-launcher CLI

Usage:
    liquidity-launcher preview --config strategy.yaml [--clearing-price Q96] [--raised N]
    liquidity-launcher simulate --config strategy.yaml [--clearing-price Q96] [--raised N]

The YAML file holds a ``strategy:`` mapping (StrategyConfig fields) and an
optional ``auction:`` mapping with ``clearing_price`` (Q96 currency per
token) and ``currency_raised``.
"""

import argparse
import json
import sys
from decimal import Decimal
from typing import Any, Dict, List, Optional

import yaml

from .chain import FixedPriceAuctionFactory, InMemoryChain, InMemoryPositionExecutor
from .constants import Q96
from .errors import LaunchError
from .logging_utils import setup_logging
from .math.price_math import sqrt_price_x96_to_price
from .planning.builder import Plan
from .planning.planner import build_migration_plan, create_migration_data, plan_final_take_pair
from .planning.types import MigrationData
from .settings import settings
from .strategy import LBPStrategy, StrategyConfig

DEPLOYER = "0x00000000000000000000000000000000000d3910"
BIDDER = "0x00000000000000000000000000000000000b1dde"
STRATEGY_ADDRESS = "0x000000000000000000000000000000000057a7e9"
EXECUTOR_ADDRESS = "0x00000000000000000000000000000000000e8ec0"


def _load(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _parse_price(value: str) -> int:
    """Accept a raw Q96 integer or a decimal price prefixed with '='."""
    if value.startswith("="):
        return int(Decimal(value[1:]) * Q96)
    return int(value)


def _auction_inputs(raw: Dict[str, Any], args: argparse.Namespace) -> Dict[str, int]:
    auction = dict(raw.get("auction") or {})
    if args.clearing_price is not None:
        auction["clearing_price"] = _parse_price(args.clearing_price)
    if args.raised is not None:
        auction["currency_raised"] = args.raised
    missing = [k for k in ("clearing_price", "currency_raised") if k not in auction]
    if missing:
        raise SystemExit(f"missing auction inputs: {', '.join(missing)}")
    return {
        "clearing_price": int(auction["clearing_price"]),
        "currency_raised": int(auction["currency_raised"]),
    }


def describe_plan(plan: Plan) -> List[Dict[str, Any]]:
    steps = []
    for index, operation in enumerate(plan):
        params = {
            key: (value.__dict__ if hasattr(value, "__dict__") else value)
            for key, value in operation.params.__dict__.items()
            if key != "hook_data"
        }
        steps.append({"step": index, "action": operation.action.name, "params": params})
    return steps


def describe_migration(data: MigrationData) -> Dict[str, Any]:
    return {
        "sqrt_price_x96": data.sqrt_price,
        "pool_price": sqrt_price_x96_to_price(data.sqrt_price),
        "token_amount": data.token_amount,
        "currency_amount": data.currency_amount,
        "leftover_currency": data.leftover_currency,
        "liquidity": data.liquidity,
        "should_create_one_sided": data.should_create_one_sided,
        "has_one_sided_params": data.has_one_sided_params,
    }


def cmd_preview(args: argparse.Namespace) -> int:
    raw = _load(args.config)
    config = StrategyConfig(**raw["strategy"])
    config.validate_parameters()
    inputs = _auction_inputs(raw, args)

    data = create_migration_data(config, inputs["clearing_price"], inputs["currency_raised"])
    plan, data = build_migration_plan(config, data)
    batch = plan.then(plan_final_take_pair(config, STRATEGY_ADDRESS))

    print(json.dumps({"migration": describe_migration(data), "plan": describe_plan(batch)}, indent=2))
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    raw = _load(args.config)
    config = StrategyConfig(**raw["strategy"])
    inputs = _auction_inputs(raw, args)

    chain = InMemoryChain(block=0)
    factory = FixedPriceAuctionFactory(
        chain, config.currency, inputs["clearing_price"], end_block=config.migration_allowed_at
    )
    executor = InMemoryPositionExecutor(chain, EXECUTOR_ADDRESS, caller=STRATEGY_ADDRESS)
    strategy = LBPStrategy(
        STRATEGY_ADDRESS, config, chain, chain, executor, factory, chain.current_block
    )

    chain.mint(config.token, DEPLOYER, config.total_supply)
    chain.transfer(config.token, DEPLOYER, STRATEGY_ADDRESS, config.total_supply)
    auction = strategy.on_funded()

    chain.mint(config.currency, BIDDER, inputs["currency_raised"])
    auction.bid(BIDDER, inputs["currency_raised"])

    chain.advance(config.migration_allowed_at - chain.current_block())
    auction.sweep_currency()
    data = strategy.migrate()

    pool = chain.pool(config.pool_key)
    print(json.dumps({
        "migration": describe_migration(data),
        "pool": {"tick": pool.tick, "active_liquidity": pool.liquidity},
        "positions": [position.__dict__ for position in pool.positions],
        "recipient_balances": {
            "token": chain.balance_of(config.token, config.position_recipient),
            "currency": chain.balance_of(config.currency, config.position_recipient),
        },
    }, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liquidity-launcher",
        description="Plan and simulate auction-to-AMM liquidity migrations",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("preview", cmd_preview, "Print the migration plan for an auction outcome"),
        ("simulate", cmd_simulate, "Run the full lifecycle on an in-memory chain"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--config", default=settings.STRATEGY_PATH, help="Strategy YAML file")
        sub.add_argument("--clearing-price", default=None,
                         help="Q96 clearing price, or '=<decimal>' for a plain price")
        sub.add_argument("--raised", type=int, default=None, help="Currency raised by the auction")
        sub.set_defaults(handler=handler)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    try:
        return args.handler(args)
    except LaunchError as e:
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

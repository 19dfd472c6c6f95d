"""
Command line entry point.

Loads a market snapshot, reduced token list and wallet balances from
JSON files, then prints the investment breakdown and the swaps needed.
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from dotenv import load_dotenv

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.engine import RebalanceEngine
from bag_rebalancer.core.exceptions import RebalanceError
from bag_rebalancer.data.holdings import build_holdings, holdings_to_usd, resolve_investment_amount, scale_holdings
from bag_rebalancer.data.loader import MarketSnapshotLoader
from bag_rebalancer.execution.orders import SwapPlan
from bag_rebalancer.monitoring.logger import setup_logging
from bag_rebalancer.risk.engine import AllocationTarget


class BalancedBagRebalancer:
    """
    Runs one rebalance computation from files.

    Flow:
    1. Load snapshot, reduced list, balances
    2. Value holdings (gas reserve withheld) and resolve investment amount
    3. Compute allocation for the profile
    4. Plan swaps from the scaled holdings
    """

    def __init__(self, config: Config):
        self.config = config
        self.logger = setup_logging(config)

        errors = config.validate()
        if errors:
            self.logger.error("Configuration validation failed:")
            for err in errors:
                self.logger.error(f"  - {err}")
            raise SystemExit(1)

        self.loader = MarketSnapshotLoader(config)
        self.engine = RebalanceEngine(config)

    def run(
        self,
        snapshot_path: str,
        balances_path: str,
        profile: str,
        amount: Optional[str] = None,
        reduced_path: Optional[str] = None,
        balances_in_usd: bool = False,
    ) -> Dict:
        tokens = self.loader.load_file(snapshot_path)
        reduced = _read_json(reduced_path) if reduced_path else None
        balances = _read_json(balances_path)

        if balances_in_usd:
            holdings_usd = {s: float(v) for s, v in balances.items() if float(v) != 0}
        else:
            prices = {t.symbol: t.current_price for t in tokens}
            holdings = build_holdings(
                balances,
                prices,
                gas_token=self.config.wallet.gas_token,
                gas_reserve_usd=self.config.wallet.gas_reserve_usd,
            )
            holdings_usd = holdings_to_usd(holdings)

        wallet_total = sum(holdings_usd.values())
        invest = resolve_investment_amount(amount if amount is not None else "100%", wallet_total)
        current = scale_holdings(holdings_usd, wallet_total, invest)
        self.logger.info(f"Wallet value ${wallet_total:,.2f}, investing ${invest:,.2f}")

        target = self.engine.compute_allocation(tokens, reduced, profile, invest)
        plan = self.engine.plan(current, target)
        return {
            "wallet_total": wallet_total,
            "amount": invest,
            "current": current,
            "target": target,
            "plan": plan,
            "metrics": self.engine.metrics.snapshot(),
        }


def _read_json(path: str):
    with open(path, "r") as f:
        return json.load(f)


def render(target: AllocationTarget, plan: SwapPlan) -> str:
    """Human-readable breakdown and swap tables."""
    lines: List[str] = []
    lines.append(f"Investment breakdown ({target.profile.value}, ${target.total_amount:,.2f})")
    frame = target.to_frame()
    lines.append(frame.to_string(index=False, float_format=lambda v: f"{v:,.2f}") if len(frame) else "  (empty)")
    lines.append("")
    lines.append("Swaps")
    swaps = pd.DataFrame([s.to_dict() for s in plan.swaps], columns=["sell", "buy", "amount"])
    lines.append(swaps.to_string(index=False, float_format=lambda v: f"{v:,.2f}") if len(swaps) else "  (already balanced)")
    for w in target.warnings + plan.warnings:
        lines.append(f"WARNING: {w}")
    return "\n".join(lines)


def to_json(result: Dict) -> Dict:
    target: AllocationTarget = result["target"]
    plan: SwapPlan = result["plan"]
    return {
        "profile": target.profile.value,
        "wallet_total": result["wallet_total"],
        "amount": result["amount"],
        "breakdown": {
            s: {"amount": tw.amount_usd, "percentage": tw.percentage} for s, tw in target.items()
        },
        "swaps": [s.to_dict() for s in plan.swaps],
        "warnings": target.warnings + plan.warnings,
        "metrics": result["metrics"],
    }


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Balanced bag rebalancing engine")
    parser.add_argument("--snapshot", required=True, help="Market snapshot JSON file")
    parser.add_argument("--balances", required=True, help="Wallet balances JSON file ({symbol: quantity})")
    parser.add_argument("--balances-usd", action="store_true", help="Balances file holds USD values, not quantities")
    parser.add_argument("--reduced", default="", help="Reduced token list JSON file (list of symbols)")
    parser.add_argument("--profile", default="Balanced", help="Secure, Balanced or Offensive")
    parser.add_argument("--amount", default=None, help="Amount to invest: USD value or percentage like 50%%")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--json", dest="json_out", default="", help="Write result as JSON to this path")
    args = parser.parse_args(argv)

    # Load .env if present (before Config) to populate BAG_* variables
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    config = Config.from_yaml(args.config) if args.config else Config()
    app = BalancedBagRebalancer(config)

    try:
        result = app.run(
            snapshot_path=args.snapshot,
            balances_path=args.balances,
            profile=args.profile,
            amount=args.amount,
            reduced_path=args.reduced or None,
            balances_in_usd=args.balances_usd,
        )
    except (RebalanceError, ValueError, OSError) as e:
        app.logger.error(f"Rebalance failed: {e}")
        return 1

    print(render(result["target"], result["plan"]))

    if args.json_out:
        with open(args.json_out, "w") as f:
            json.dump(to_json(result), f, indent=2)

    return 0


if __name__ == "__main__":
    sys.exit(main())

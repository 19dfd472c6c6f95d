"""
Wallet holdings preparation.

Balances come from the wallet collaborator as token quantities; the
planner works in USD. A small reserve of the gas token is withheld so
the wallet can still pay for the swaps.
"""

from typing import Dict, List, Mapping, Union
import math

from bag_rebalancer.data.models import Holding


def build_holdings(
    balances: Mapping[str, float],
    prices: Mapping[str, float],
    gas_token: str = "ETH",
    gas_reserve_usd: float = 2.0,
) -> List[Holding]:
    """
    Convert token quantities to USD holdings.

    Args:
        balances: symbol -> quantity
        prices: symbol -> USD price
        gas_token: Token used to pay network fees
        gas_reserve_usd: USD value of gas_token kept out of the rebalance

    Returns:
        Holdings for nonzero balances, in balance order
    """
    holdings: List[Holding] = []
    for symbol, qty in balances.items():
        qty = float(qty)
        if qty == 0:
            continue
        if symbol not in prices:
            raise ValueError(f"No price for held token {symbol}")
        price = float(prices[symbol])
        total = qty * price
        if symbol == gas_token and gas_reserve_usd > 0 and price > 0:
            reserve = min(gas_reserve_usd, total)
            qty -= reserve / price
            total -= reserve
        holdings.append(Holding(symbol=symbol, quantity=qty, price=price, total_usd=total))
    return holdings


def holdings_to_usd(holdings: List[Holding]) -> Dict[str, float]:
    """symbol -> USD value."""
    return {h.symbol: h.total_usd for h in holdings}


def resolve_investment_amount(value: Union[str, float, int], wallet_total: float) -> float:
    """
    Resolve the amount to invest.

    "25%" means a share of the wallet; a plain number is an absolute USD
    amount. Either is capped at the wallet value.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("%"):
            try:
                pct = float(text[:-1])
            except ValueError:
                raise ValueError(f"Invalid percentage: {value!r}")
            if not math.isfinite(pct) or pct < 0:
                raise ValueError(f"Investment percentage must be a finite value >= 0, got {value!r}")
            return min(wallet_total * pct / 100.0, wallet_total)
        try:
            amount = float(text)
        except ValueError:
            raise ValueError(f"Invalid investment amount: {value!r}")
    else:
        amount = float(value)

    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"Investment amount must be a finite value >= 0, got {amount}")
    return min(amount, wallet_total)


def scale_holdings(holdings_usd: Mapping[str, float], wallet_total: float, amount: float) -> Dict[str, float]:
    """Scale each holding so the bag sums to the invested amount."""
    if wallet_total <= 0:
        return {s: 0.0 for s in holdings_usd}
    ratio = amount / wallet_total
    return {s: v * ratio for s, v in holdings_usd.items()}

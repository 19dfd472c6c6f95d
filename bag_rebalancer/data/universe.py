"""
Token Universe Curator

Filters the snapshot down to the reduced symbol list, removes variant
tickers, and ranks by market cap (TVL fallback) into the candidate set
that signals are computed on.
"""

from typing import Iterable, List, Optional, Sequence
import logging

from bag_rebalancer.core.config import Config
from bag_rebalancer.data.models import MarketToken

STABLECOIN_SYMBOLS = ("USDT", "USDC", "DAI", "BUSD", "TUSD", "UST", "FRAX", "GUSD", "PAX", "HUSD")


def remove_suffix_variants(symbols: Iterable[str], suffix: str) -> List[str]:
    """Drop symbols ending with suffix, except the suffix itself (xSTRK, nstSTRK vs STRK)."""
    if not suffix:
        return list(symbols)
    return [s for s in symbols if not s.endswith(suffix) or s == suffix]


def reduce_token_list(tokens: Sequence[MarketToken]) -> List[str]:
    """
    Collapse correlated tickers sharing a 3-character window.

    For every 3-character window of every symbol, the shortest symbol seen
    for that window wins. Returns surviving symbols in first-seen order.
    """
    winners = {}
    for token in tokens:
        symbol = token.symbol
        for i in range(len(symbol) - 2):
            window = symbol[i:i + 3]
            current = winners.get(window)
            if current is None or len(symbol) < len(current.symbol):
                winners[window] = token
    out: List[str] = []
    for token in winners.values():
        if token.symbol not in out:
            out.append(token.symbol)
    return out


class TokenCurator:
    """
    Candidate universe selection.

    1. Keep symbols in the reduced list that do not contain another listed symbol
    2. Fail open (no filtering) when no reduced list is available
    3. Sort by descending market cap (TVL when cap is zero)
    4. Truncate to the candidate size
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def curate(
        self,
        tokens: Sequence[MarketToken],
        reduced_list: Optional[Sequence[str]] = None,
    ) -> List[MarketToken]:
        """
        Build the cap-ordered candidate universe.

        Args:
            tokens: Market snapshot
            reduced_list: Symbols surviving external stablecoin/LST/correlation
                filtering, or None when that step is unavailable

        Returns:
            Ordered candidate list (at most candidate_size tokens)
        """
        unique = self._dedupe(tokens)

        if reduced_list is not None:
            kept = self.filter_tokens(unique, reduced_list)
        else:
            self.logger.warning("No reduced token list available, using full universe")
            kept = unique
            if self.config.universe.stable_denylist_fallback:
                kept = [t for t in kept if t.symbol not in STABLECOIN_SYMBOLS]

        ranked = sorted(kept, key=lambda t: t.effective_market_cap, reverse=True)
        candidates = ranked[: self.config.universe.candidate_size]
        self.logger.debug(f"Candidates: {[t.symbol for t in candidates]}")
        return candidates

    def filter_tokens(self, tokens: Sequence[MarketToken], reduced_list: Sequence[str]) -> List[MarketToken]:
        """Keep tokens listed in reduced_list, dropping those that contain a different listed symbol."""
        listed = remove_suffix_variants(reduced_list, self.config.universe.drop_suffix)
        listed_set = set(listed)
        out: List[MarketToken] = []
        for token in tokens:
            symbol = token.symbol
            if symbol not in listed_set:
                continue
            shadowed = [r for r in listed if r != symbol and r in symbol]
            if shadowed:
                self.logger.debug(f"Dropping {symbol}: variant of {shadowed[0]}")
                continue
            out.append(token)
        return out

    def _dedupe(self, tokens: Sequence[MarketToken]) -> List[MarketToken]:
        seen = set()
        out: List[MarketToken] = []
        for token in tokens:
            if token.symbol in seen:
                self.logger.debug(f"Duplicate symbol {token.symbol} in snapshot, keeping first")
                continue
            seen.add(token.symbol)
            out.append(token)
        return out

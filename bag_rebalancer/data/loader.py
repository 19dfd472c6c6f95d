"""
Market Snapshot Loader

Turns raw market-data records (as returned by the token price API and
stored by the caller) into typed MarketToken objects.
Resolves market cap / TVL fallback and malformed tickers at ingestion.
"""

from typing import Any, Dict, List, Optional, Union
import json
import logging

from bag_rebalancer.core.config import Config
from bag_rebalancer.core.exceptions import InvalidSnapshot
from bag_rebalancer.data.models import MarketToken


class MarketSnapshotLoader:
    """
    Builds a market snapshot from caller-supplied data.

    Handles:
    - List snapshots: [{symbol, market: {...}, linePriceFeedInUsd: [...]}, ...]
    - Symbol-keyed snapshots: {BTC: {...}, ETH: {...}}
    - Market cap overrides (e.g. wrapped BTC priced with the BTC cap)
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        """
        Initialize loader.

        Args:
            config: Engine configuration
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def load(self, records: Union[List[Dict[str, Any]], Dict[str, Dict[str, Any]]]) -> List[MarketToken]:
        """
        Parse a snapshot.

        Args:
            records: List of records, or mapping symbol -> record

        Returns:
            List of MarketToken in snapshot order
        """
        if isinstance(records, dict):
            items = [(sym, rec) for sym, rec in records.items()]
        elif isinstance(records, list):
            items = [(None, rec) for rec in records]
        else:
            raise InvalidSnapshot(f"Snapshot must be a list or mapping, got {type(records).__name__}")

        overrides = self.config.universe.market_cap_overrides
        tokens: List[MarketToken] = []
        for key, rec in items:
            if not isinstance(rec, dict):
                self.logger.warning(f"Skipping non-object snapshot entry: {rec!r}")
                continue
            try:
                token = MarketToken.from_record(rec, symbol=key)
            except (TypeError, ValueError) as e:
                self.logger.warning(f"Skipping malformed record {key or rec.get('symbol')!r}: {e}")
                continue
            if not token.symbol:
                self.logger.warning("Skipping record without symbol")
                continue
            if token.symbol in overrides:
                token = token.with_market_cap(overrides[token.symbol])
                self.logger.debug(f"Market cap override for {token.symbol}: ${token.market_cap:,.0f}")
            tokens.append(token)

        self.logger.info(f"Loaded {len(tokens)} tokens from snapshot")
        return tokens

    def load_file(self, path: str) -> List[MarketToken]:
        """Load a snapshot from a JSON file."""
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidSnapshot(f"Snapshot file {path} is not valid JSON: {e}") from e
        return self.load(data)

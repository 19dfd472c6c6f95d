"""Market snapshot ingestion, universe curation, holdings."""

from bag_rebalancer.data.models import MarketToken, Holding
from bag_rebalancer.data.loader import MarketSnapshotLoader
from bag_rebalancer.data.universe import TokenCurator

__all__ = ["MarketToken", "Holding", "MarketSnapshotLoader", "TokenCurator"]

class RebalanceError(Exception):
    """Base class for engine errors"""
    pass


class InsufficientHistory(RebalanceError):
    """Raised when a price series is too short to compute a momentum signal"""

    def __init__(self, symbol: str = "", length: int = 0):
        self.symbol = symbol
        self.length = length
        label = symbol or "<unknown>"
        super().__init__(f"Price history for {label} too short for EMA ({length} samples, need >= 1)")


class DegenerateUniverse(RebalanceError):
    """Raised when fewer than 2 distinct-cap tokens remain to calibrate the weight exponent"""
    pass


class SwapPlanningStalled(RebalanceError):
    """Raised (or recorded) when no sell/buy pairing remains while deltas are unsettled"""
    pass


class UnknownProfile(RebalanceError, ValueError):
    """Raised when a risk profile name is not in the profile table"""
    pass


class InvalidSnapshot(RebalanceError, ValueError):
    """Raised when a market snapshot cannot be parsed"""
    pass

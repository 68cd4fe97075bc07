"""Error types shared across the chain data access layer."""


class PrecisionLossError(ValueError):
    """A value cannot be encoded as 64.64 fixed point without losing information."""


class UnknownChainError(ValueError):
    """A chain id has no configuration where one is required."""

# ledger_sampling/__init__.py

# Audit sampling engine for normalized ledger rows.

from .model.ledger import AmountType, LedgerRow
from .sampling import SamplingConfig, SamplingResults, SamplingService

__version__ = "0.1.0"

__all__ = [
    "AmountType",
    "LedgerRow",
    "SamplingConfig",
    "SamplingResults",
    "SamplingService",
]

from .ledger import (
    AccountType,
    AmountType,
    LedgerRow,
    amounts_for,
    classify_account,
    eligible_rows,
    select_amount,
)

__all__ = [
    "AccountType",
    "AmountType",
    "LedgerRow",
    "amounts_for",
    "classify_account",
    "eligible_rows",
    "select_amount",
]

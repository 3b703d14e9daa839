"""Ledger row model.

Contains the canonical row type handed over by the normalizer and the
amount-selection policy used everywhere a single amount per row is needed.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import numpy as np


class AmountType(Enum):
    """Amount-selection policy."""

    DEBIT = "debit"
    CREDIT = "credit"
    BOTH = "both"
    ACCOUNT = "account"  # Side chosen from the account type

    @classmethod
    def from_string(cls, value: str) -> "AmountType":
        """Convert string to AmountType enum."""
        for amount_type in cls:
            if amount_type.value == value.lower():
                return amount_type
        raise ValueError(f"Unknown amount type: {value}")

    @property
    def label(self) -> str:
        return {
            AmountType.DEBIT: "Debit",
            AmountType.CREDIT: "Credit",
            AmountType.BOTH: "Debit + Credit",
            AmountType.ACCOUNT: "By account type",
        }[self]


class AccountType(Enum):
    """Account classification derived from the account name."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    EXPENSE = "expense"
    REVENUE = "revenue"
    UNKNOWN = "unknown"


# Checked in this order; the first type with a matching keyword wins
ACCOUNT_KEYWORDS = (
    (
        AccountType.ASSET,
        (
            "자산", "현금", "예금", "매출채권", "외상매출금", "선급금", "선급비용",
            "재고", "미수금", "미수수익",
            "asset", "cash", "bank", "receivable", "inventory", "prepaid",
        ),
    ),
    (
        AccountType.LIABILITY,
        (
            "부채", "차입금", "사채", "매입채무", "외상매입금", "미지급금",
            "미지급비용", "선수금", "선수수익", "예수금",
            "liabilit", "payable", "loan", "borrowing", "accrued", "unearned",
            "deferredrevenue",
        ),
    ),
    (
        AccountType.EQUITY,
        (
            "자본", "주식", "잉여금",
            "equity", "capital", "retainedearnings", "sharecapital",
        ),
    ),
    (
        AccountType.EXPENSE,
        (
            "비용", "원가", "판매비", "관리비", "급여", "임금", "수당", "복리후생비",
            "임차료", "광고선전비", "운반비", "보험료", "감가상각비", "손실",
            "expense", "cost", "salar", "wage", "rent", "depreciation",
            "insurance", "freight", "advertising",
        ),
    ),
    (
        AccountType.REVENUE,
        ("매출", "수익", "revenue", "sales", "income"),
    ),
)

DEBIT_SIDE_ACCOUNTS = (AccountType.ASSET, AccountType.EXPENSE)
CREDIT_SIDE_ACCOUNTS = (AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE)


def classify_account(account_name: str) -> AccountType:
    """Classify an account by keywords in its name.

    Whitespace and case are ignored. Names matching no keyword are UNKNOWN.
    """
    normalized = "".join((account_name or "").split()).lower()
    for account_type, keywords in ACCOUNT_KEYWORDS:
        if any(keyword in normalized for keyword in keywords):
            return account_type
    return AccountType.UNKNOWN


@dataclass(frozen=True, eq=False)
class LedgerRow:
    """One journal/ledger line.

    Rows compare and hash by identity: two rows carrying the same values but
    coming from different source positions are different rows.
    """

    date: Optional[date] = None
    debit_amount: float = 0.0
    credit_amount: float = 0.0
    account_name: str = ""
    vendor_name: str = ""
    description: str = ""
    entry_number: Optional[str] = None
    # Original spreadsheet columns, only used for export
    fields: Dict[str, Any] = field(default_factory=dict)


def select_amount(row: LedgerRow, amount_type: AmountType) -> float:
    """Derive the single non-negative amount of a row under a policy.

    Args:
        row: Ledger row
        amount_type: Amount-selection policy

    Returns:
        Absolute debit, absolute credit, or the sum of both. Under the
        ACCOUNT policy asset and expense accounts take the debit (the credit
        when the debit is zero), liability, equity and revenue accounts the
        credit (or the debit), and unclassified accounts the sum.
    """
    debit = abs(row.debit_amount or 0.0)
    credit = abs(row.credit_amount or 0.0)

    if amount_type == AmountType.DEBIT:
        return debit
    if amount_type == AmountType.CREDIT:
        return credit
    if amount_type == AmountType.ACCOUNT:
        account_type = classify_account(row.account_name)
        if account_type in DEBIT_SIDE_ACCOUNTS:
            return debit or credit
        if account_type in CREDIT_SIDE_ACCOUNTS:
            return credit or debit
    return debit + credit


def amounts_for(rows: Iterable[LedgerRow], amount_type: AmountType) -> np.ndarray:
    """Amounts of rows as a float array aligned with the input order."""
    return np.array([select_amount(row, amount_type) for row in rows], dtype=float)


def eligible_rows(rows: Iterable[LedgerRow], amount_type: AmountType) -> List[LedgerRow]:
    """Rows whose selected amount is strictly positive, in original order."""
    return [row for row in rows if select_amount(row, amount_type) > 0]

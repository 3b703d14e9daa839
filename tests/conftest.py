"""Pytest fixtures for testing"""

from datetime import date, timedelta
from typing import Callable, List

import numpy as np
import pytest

from ledger_sampling.model.ledger import LedgerRow


def build_rows(debits: List[float], credits: List[float] = None) -> List[LedgerRow]:
    """Ledger rows with one row per amount, dated one day apart."""
    credits = credits or [0.0] * len(debits)
    base_date = date(2024, 1, 1)
    return [
        LedgerRow(
            date=base_date + timedelta(days=i),
            debit_amount=debit,
            credit_amount=credit,
            account_name="Accounts payable",
            vendor_name=f"Vendor {i % 7}",
            description=f"Entry {i}",
            entry_number=f"JE-{i:05d}",
            fields={
                "date": base_date + timedelta(days=i),
                "description": f"Entry {i}",
                "debit": debit,
                "credit": credit,
            },
        )
        for i, (debit, credit) in enumerate(zip(debits, credits))
    ]


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator"""
    return np.random.default_rng(12345)


@pytest.fixture
def make_rows() -> Callable[..., List[LedgerRow]]:
    """Factory for ledger rows from debit (and credit) amounts"""
    return build_rows


@pytest.fixture
def skewed_rows() -> List[LedgerRow]:
    """99 rows of 1,000 and one row of 50,000"""
    return build_rows([1000.0] * 99 + [50000.0])


@pytest.fixture
def ledger_rows() -> List[LedgerRow]:
    """Mixed debit/credit ledger with a few large entries"""
    debits = []
    credits = []
    for i in range(120):
        if i % 3 == 0:
            debits.append(0.0)
            credits.append(float(200 + (i * 37) % 900))
        else:
            debits.append(float(100 + (i * 53) % 1500))
            credits.append(0.0)
    debits[17] = 250000.0
    debits[64] = 180000.0
    return build_rows(debits, credits)

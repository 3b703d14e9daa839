"""Unit tests for population metrics and descriptive statistics"""

import math
from datetime import date

import numpy as np
import pytest

from ledger_sampling.model.ledger import AmountType, LedgerRow, select_amount
from ledger_sampling.scripts.calc_utils import (
    iqr_bounds,
    population_std_dev,
    quartiles,
    z_score,
)
from ledger_sampling.scripts.population import (
    compute_population_metrics,
    describe_amounts,
    summarize_population,
)


@pytest.mark.parametrize(
    "amount_type,eligible",
    [(AmountType.DEBIT, 80), (AmountType.CREDIT, 40), (AmountType.BOTH, 120)],
)
def test_metrics_follow_amount_policy(ledger_rows, amount_type, eligible):
    metrics = compute_population_metrics(ledger_rows, amount_type)

    assert metrics.row_count == 120
    assert metrics.eligible_row_count == eligible
    assert metrics.total_amount == pytest.approx(
        sum(select_amount(row, amount_type) for row in ledger_rows)
    )


def test_metrics_of_empty_population():
    metrics = compute_population_metrics([], AmountType.BOTH)

    assert metrics.row_count == 0
    assert metrics.total_amount == 0.0
    assert metrics.is_empty


def test_select_amount_uses_absolute_values():
    row = LedgerRow(debit_amount=-150.0, credit_amount=25.0)

    assert select_amount(row, AmountType.DEBIT) == 150.0
    assert select_amount(row, AmountType.CREDIT) == 25.0
    assert select_amount(row, AmountType.BOTH) == 175.0


def test_rows_compare_by_identity():
    first = LedgerRow(debit_amount=10.0)
    second = LedgerRow(debit_amount=10.0)

    assert first != second
    assert len({first, second}) == 2


def test_describe_amounts():
    stats = describe_amounts(np.array([4.0, 0.0, 1.0, 3.0, 2.0]))

    assert stats.count == 4
    assert stats.total == 10.0
    assert stats.mean == 2.5
    assert stats.median == 3.0
    assert (stats.q1, stats.q3, stats.iqr) == (2.0, 4.0, 2.0)
    assert stats.std_dev == pytest.approx(math.sqrt(1.25))
    assert stats.to_dict()["max_amount"] == 4.0
    assert stats.min_amount == 1.0


def test_describe_amounts_requires_positive_values():
    with pytest.raises(ValueError):
        describe_amounts(np.array([0.0, 0.0]))


def test_summarize_population(make_rows):
    rows = make_rows([100.0, 0.0, 300.0], [0.0, 50.0, 0.0])
    summary = summarize_population(rows)

    assert summary["row_count"] == 3
    assert summary["period"] == {"start": date(2024, 1, 1), "end": date(2024, 1, 3)}
    assert summary["amount_type"] == "both"
    assert summary["overall"]["count"] == 3
    assert summary["debit"] == {"count": 2, "total": 400.0, "max": 300.0, "median": 300.0}
    assert summary["credit"]["total"] == 50.0


def test_summarize_population_without_amounts():
    summary = summarize_population([LedgerRow(), LedgerRow()])

    assert summary["period"] is None
    assert summary["overall"] is None
    assert summary["debit"]["count"] == 0


def test_population_std_dev():
    assert population_std_dev(np.array([])) == 0.0
    assert population_std_dev(np.array([0.1] * 7)) == 0.0
    assert population_std_dev(np.array([2.0, 4.0])) == 1.0


def test_quartiles_and_fences():
    q1, q3 = quartiles(np.arange(1.0, 9.0))

    assert (q1, q3) == (3.0, 7.0)
    assert iqr_bounds(q1, q3) == (-3.0, 13.0)
    with pytest.raises(ValueError):
        quartiles(np.array([]))


def test_z_score():
    assert z_score(13.0, 10.0, 1.5) == 2.0
    assert z_score(13.0, 10.0, 0.0) is None

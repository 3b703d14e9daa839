"""Population metrics and descriptive statistics.

The metrics feed the sample size estimator; the summary is the context block
handed to the commentary collaborator.
"""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Sequence

import numpy as np

from ledger_sampling.model.ledger import (
    AmountType,
    LedgerRow,
    amounts_for,
    eligible_rows,
)
from ledger_sampling.scripts.calc_utils import population_std_dev, quartiles

logger = logging.getLogger("ledger_sampling.scripts.population")


@dataclass(frozen=True)
class PopulationMetrics:
    """Size and monetary total of a population under one amount policy."""

    amount_type: AmountType
    row_count: int = 0
    eligible_row_count: int = 0
    total_amount: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.eligible_row_count == 0


@dataclass(frozen=True)
class AmountStatistics:
    """Descriptive statistics of a positive amount array."""

    count: int
    total: float
    mean: float
    std_dev: float
    min_amount: float
    max_amount: float
    median: float
    q1: float
    q3: float
    iqr: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_population_metrics(
    rows: Sequence[LedgerRow], amount_type: AmountType
) -> PopulationMetrics:
    """Count eligible rows and sum their amounts.

    Summary rows (monthly/cumulative totals) must already be removed
    upstream; nothing is filtered here besides non-positive amounts.

    Args:
        rows: Ledger rows
        amount_type: Amount-selection policy

    Returns:
        PopulationMetrics, all zero for an empty or zero-amount population
    """
    eligible = eligible_rows(rows, amount_type)
    total = float(amounts_for(eligible, amount_type).sum()) if eligible else 0.0

    metrics = PopulationMetrics(
        amount_type=amount_type,
        row_count=len(rows),
        eligible_row_count=len(eligible),
        total_amount=total,
    )
    logger.debug(
        f"Population metrics ({amount_type.value}): {metrics.eligible_row_count}"
        f"/{metrics.row_count} eligible rows, total {metrics.total_amount:,.2f}"
    )
    return metrics


def describe_amounts(amounts: np.ndarray) -> AmountStatistics:
    """Calculate descriptive statistics for positive amounts.

    Median and quartiles are order statistics of the sorted array
    (sorted[floor(n/2)], sorted[floor(n/4)], sorted[floor(3n/4)]).

    Args:
        amounts: Array of amounts (non-positive values are ignored)

    Returns:
        AmountStatistics

    Raises:
        ValueError: If no positive amount is present
    """
    positive = amounts[amounts > 0]
    if positive.size == 0:
        raise ValueError("No positive amounts to describe")

    sorted_amounts = np.sort(positive)
    mean = float(positive.mean())
    q1, q3 = quartiles(sorted_amounts)

    return AmountStatistics(
        count=int(positive.size),
        total=float(positive.sum()),
        mean=mean,
        std_dev=population_std_dev(positive, mean),
        min_amount=float(sorted_amounts[0]),
        max_amount=float(sorted_amounts[-1]),
        median=float(sorted_amounts[math.floor(positive.size / 2)]),
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
    )


def _side_breakdown(rows: Sequence[LedgerRow], amount_type: AmountType) -> Dict[str, Any]:
    amounts = amounts_for(rows, amount_type)
    amounts = amounts[amounts > 0]
    if amounts.size == 0:
        return {"count": 0, "total": 0.0, "max": None, "median": None}

    stats = describe_amounts(amounts)
    return {
        "count": stats.count,
        "total": stats.total,
        "max": stats.max_amount,
        "median": stats.median,
    }


def summarize_population(
    rows: Sequence[LedgerRow], amount_type: AmountType = AmountType.BOTH
) -> Dict[str, Any]:
    """Build a statistics summary of a ledger population.

    Args:
        rows: Ledger rows of one account
        amount_type: Policy used for the overall statistics

    Returns:
        Dictionary with the analysis period, row count, overall statistics
        (None when no row has a positive amount) and debit/credit breakdowns
    """
    dates: List = sorted(row.date for row in rows if row.date is not None)
    period = {"start": dates[0], "end": dates[-1]} if dates else None

    amounts = amounts_for(rows, amount_type)
    overall = None
    if np.any(amounts > 0):
        overall = describe_amounts(amounts).to_dict()

    return {
        "row_count": len(rows),
        "period": period,
        "amount_type": amount_type.value,
        "overall": overall,
        "debit": _side_breakdown(rows, AmountType.DEBIT),
        "credit": _side_breakdown(rows, AmountType.CREDIT),
    }

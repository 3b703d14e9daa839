"""Composite audit sample built from several selection rules.

The sample is filled part by part, each part taking its share of the
requested size from rows not already chosen:

1. Largest amounts (30%)
2. Most recent dated rows (20%)
3. Amounts more than 2 standard deviations from the mean (10%)
4. Rows spread evenly over the calendar months (30%)
5. Random rows (10%)

Rows still missing after the five parts are drawn at random, so the sample
always holds min(sample_size, population_size) distinct rows.
"""

import logging
import math
from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from ledger_sampling.scripts.calc_utils import population_std_dev

logger = logging.getLogger("ledger_sampling.scripts.smart_sample")

# (part, percent of the sample size), in selection order
SMART_QUOTAS = (
    ("top_amount", 30),
    ("recent", 20),
    ("outlier", 10),
    ("monthly", 30),
    ("random", 10),
)
OUTLIER_STD_MULTIPLIER = 2.0


def smart_quotas(sample_size: int) -> Dict[str, int]:
    """Rows allotted to each part: floor(sample_size x percent / 100)."""
    return {part: sample_size * percent // 100 for part, percent in SMART_QUOTAS}


def _take(
    candidates: Sequence[int],
    limit: int,
    selected: List[int],
    used: Set[int],
    sample_size: int,
) -> int:
    taken = 0
    for index in candidates:
        if taken >= limit or len(selected) >= sample_size:
            break
        index = int(index)
        if index in used:
            continue
        selected.append(index)
        used.add(index)
        taken += 1
    return taken


def smart_sample_indices(
    amounts: np.ndarray,
    dates: Sequence[Optional[date]],
    sample_size: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Select a composite sample of distinct indices.

    Args:
        amounts: Amounts of the pool rows
        dates: Dates aligned with the amounts; None for undated rows
        sample_size: Requested number of rows
        rng: Random generator

    Returns:
        Array of min(sample_size, population_size) distinct indices, in
        selection order (part by part)
    """
    n = amounts.size
    size = min(max(sample_size, 0), n)
    if size == 0:
        return np.empty(0, dtype=int)
    if size == n:
        return np.arange(n)

    quotas = smart_quotas(size)
    selected: List[int] = []
    used: Set[int] = set()
    taken: Dict[str, int] = {}

    by_amount = np.argsort(-amounts, kind="stable")
    taken["top_amount"] = _take(
        by_amount, quotas["top_amount"], selected, used, size
    )

    dated = [i for i in range(n) if dates[i] is not None]
    by_date = sorted(dated, key=lambda i: dates[i], reverse=True)
    taken["recent"] = _take(by_date, quotas["recent"], selected, used, size)

    outliers: List[int] = []
    positive = amounts[amounts > 0]
    if positive.size:
        mean = float(positive.mean())
        std_dev = population_std_dev(positive, mean)
        deviation = np.abs(amounts - mean)
        outliers = [
            i
            for i in range(n)
            if amounts[i] > 0 and deviation[i] > OUTLIER_STD_MULTIPLIER * std_dev
        ]
        outliers.sort(key=lambda i: deviation[i], reverse=True)
    taken["outlier"] = _take(outliers, quotas["outlier"], selected, used, size)

    months: Dict[Tuple[int, int], List[int]] = {}
    for i in dated:
        months.setdefault((dates[i].year, dates[i].month), []).append(i)
    taken["monthly"] = 0
    if months:
        per_month = math.ceil(quotas["monthly"] / len(months))
        for key in sorted(months):
            limit = min(per_month, quotas["monthly"] - taken["monthly"])
            if limit <= 0:
                break
            taken["monthly"] += _take(
                rng.permutation(months[key]), limit, selected, used, size
            )

    remaining = [i for i in range(n) if i not in used]
    taken["random"] = _take(
        rng.permutation(remaining), quotas["random"], selected, used, size
    )

    remaining = [i for i in range(n) if i not in used]
    taken["fill"] = _take(
        rng.permutation(remaining), size - len(selected), selected, used, size
    )

    logger.debug(f"Smart sample of {size} rows by part: {taken}")
    return np.array(selected, dtype=int)

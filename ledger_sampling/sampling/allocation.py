"""Allocation of an audit sample between anomalies and a sampling strategy.

The coordinator:

1. Optionally reserves up to the requested size for high severity anomalies
   and removes them from the pool.
2. Hands the remaining budget to the chosen strategy over the remaining
   positive-amount rows.
3. Concatenates anomalies and strategy rows, truncates to the requested size
   and tags every row with its origin and the method used.

All clamping of the requested size against the available rows happens here.
"""

import logging
from typing import List, Sequence

import numpy as np

from ledger_sampling.model.ledger import (
    AmountType,
    LedgerRow,
    amounts_for,
    eligible_rows,
)
from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.types import (
    AllocationResult,
    SampledRow,
    SampleOrigin,
    SampleStatus,
)
from ledger_sampling.scripts.anomaly import Severity, detect_high_severity

logger = logging.getLogger("ledger_sampling.sampling.allocation")


def _dedupe(rows: Sequence[LedgerRow]) -> List[LedgerRow]:
    seen = set()
    unique = []
    for row in rows:
        if id(row) in seen:
            continue
        seen.add(id(row))
        unique.append(row)
    return unique


def allocate_sample(
    rows: Sequence[LedgerRow],
    requested_size: int,
    strategy: SamplingStrategy,
    amount_type: AmountType,
    include_anomalies: bool,
    rng: np.random.Generator,
) -> AllocationResult:
    """Select a tagged, size-bounded audit sample.

    Args:
        rows: Ledger rows of the population
        requested_size: Requested number of sample rows
        strategy: Sampling strategy for the non-anomaly part
        amount_type: Amount-selection policy
        include_anomalies: Whether high severity anomalies are forced in
        rng: Random generator

    Returns:
        AllocationResult whose samples never exceed requested_size and never
        repeat a row
    """
    method = strategy.method
    warnings = []

    if requested_size < 0:
        warnings.append(f"Negative sample size {requested_size} treated as 0")
        requested_size = 0

    result = AllocationResult(method=method, requested_size=requested_size)

    if not rows:
        result.status = SampleStatus.NO_DATA
        result.warnings = ["No data to sample"]
        return result

    pool = eligible_rows(rows, amount_type)
    result.eligible_count = len(pool)
    if not pool:
        result.status = SampleStatus.NO_ELIGIBLE_AMOUNT
        result.warnings = [
            f"No rows with a positive {amount_type.value} amount to sample"
        ]
        return result

    if requested_size > len(pool):
        result.clamped = True
        logger.info(
            f"Requested {requested_size} rows but only {len(pool)} are eligible"
        )

    anomaly_samples: List[LedgerRow] = []
    remaining_pool = pool
    remaining_budget = requested_size

    if include_anomalies:
        flagged = detect_high_severity(pool, amount_type)
        result.anomaly_candidates = len(flagged)
        anomaly_samples = flagged[:requested_size]
        if len(flagged) > requested_size:
            warnings.append(
                f"{len(flagged)} high severity anomalies found; only "
                f"{requested_size} fit in the sample"
            )

        anomaly_ids = {id(row) for row in anomaly_samples}
        remaining_pool = [row for row in pool if id(row) not in anomaly_ids]
        remaining_budget = max(0, requested_size - len(anomaly_samples))

    # every remaining row has a positive amount, so MUS always has a total
    remaining_amounts = amounts_for(remaining_pool, amount_type)

    strategy_rows: List[LedgerRow] = []
    if remaining_budget > 0 and remaining_pool:
        strategy_rows = strategy.select(
            remaining_pool, remaining_amounts, remaining_budget, rng
        )

    combined = _dedupe(anomaly_samples + strategy_rows)[:requested_size]
    anomaly_ids = {id(row) for row in anomaly_samples}

    for row in combined:
        is_anomaly = id(row) in anomaly_ids
        result.samples.append(
            SampledRow(
                row=row,
                origin=SampleOrigin.ANOMALY if is_anomaly else SampleOrigin.SAMPLING,
                method=method,
                severity=Severity.HIGH if is_anomaly else None,
            )
        )

    attainable = min(requested_size, len(pool))
    if len(result.samples) < attainable:
        result.under_yield = True
        result.status = SampleStatus.PARTIAL
        message = (
            f"{len(result.samples)} unique rows selected out of {attainable} "
            "attainable"
        )
        if strategy.may_under_yield:
            message += (
                "; large transactions absorbed several selection points, "
                "which is expected for monetary unit sampling"
            )
        warnings.append(message)
        logger.info(message)

    result.warnings = warnings
    logger.debug(
        f"Allocated {len(result.samples)} rows ({result.anomaly_count} anomalies) "
        f"with {strategy.display_name}"
    )
    return result

"""Amount-based anomaly detection.

Each amount starts at low severity and is escalated by independent tests:

1. Z-score: |z| > 3 is high, |z| > 2 is medium. Skipped when the standard
   deviation is zero.
2. IQR fences: outside [Q1 - 1.5*IQR, Q3 + 1.5*IQR] raises low to medium.
3. Magnitude ratio: above 10x the mean raises low to medium.
4. Maximum: equal to the population maximum while that maximum exceeds 5x
   the mean forces high. Every row sharing the maximum is flagged.

A round-amount test only adds a reason and never changes severity. Only
high severity rows are forced into an audit sample; medium and low are kept
for display.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from ledger_sampling.model.ledger import AmountType, LedgerRow, amounts_for
from ledger_sampling.scripts.calc_utils import (
    iqr_bounds,
    population_std_dev,
    quartiles,
    z_score,
)

logger = logging.getLogger("ledger_sampling.scripts.anomaly")

Z_SCORE_HIGH = 3.0
Z_SCORE_MEDIUM = 2.0
IQR_MULTIPLIER = 1.5
LARGE_RATIO = 10.0
MAX_RATIO = 5.0
ROUND_AMOUNTS = (
    1000,
    5000,
    10000,
    50000,
    100000,
    500000,
    1000000,
    5000000,
    10000000,
)


class Severity(Enum):
    """Anomaly severity tiers."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}[self]


@dataclass(frozen=True)
class AmountClassification:
    """Severity of a single amount and the reasons behind it."""

    amount: float
    severity: Severity
    z_score: Optional[float] = None
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnomalyFlag:
    """Classification attached to a ledger row."""

    row: LedgerRow
    position: int
    amount: float
    severity: Severity
    z_score: Optional[float] = None
    reasons: List[str] = field(default_factory=list)


@dataclass
class AnomalyReport:
    """Flags for every row that triggered at least one test."""

    amount_type: AmountType
    flags: List[AnomalyFlag] = field(default_factory=list)
    mean: float = 0.0
    std_dev: float = 0.0
    q1: float = 0.0
    q3: float = 0.0
    max_amount: float = 0.0

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def high_severity_rows(self) -> List[LedgerRow]:
        """Rows classified high, in original order."""
        return [flag.row for flag in self.flags if flag.severity == Severity.HIGH]

    def ranked(self) -> List[AnomalyFlag]:
        """Flags ordered by severity, then by absolute z-score."""
        return sorted(
            self.flags,
            key=lambda flag: (flag.severity.rank, abs(flag.z_score or 0.0)),
            reverse=True,
        )

    def severity_counts(self) -> Dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for flag in self.flags:
            counts[flag.severity.value] += 1
        return counts


def _is_round_amount(amount: float) -> bool:
    return any(abs(amount - pattern) < 1 for pattern in ROUND_AMOUNTS)


def classify_amounts(amounts: np.ndarray) -> List[AmountClassification]:
    """Classify every amount of a positive amount array.

    Args:
        amounts: Positive amounts (order is preserved in the output)

    Returns:
        One AmountClassification per input amount
    """
    n = amounts.size
    if n == 0:
        return []

    mean = float(amounts.mean())
    std_dev = population_std_dev(amounts, mean)
    q1, q3 = quartiles(np.sort(amounts))
    lower_bound, upper_bound = iqr_bounds(q1, q3, IQR_MULTIPLIER)
    max_amount = float(amounts.max())
    max_is_large = max_amount > mean * MAX_RATIO

    if std_dev == 0:
        logger.debug("All amounts are equal; skipping the z-score test")

    results = []
    for value in amounts:
        amount = float(value)
        severity = Severity.LOW
        reasons = []

        z = z_score(amount, mean, std_dev)
        if z is not None:
            if abs(z) > Z_SCORE_HIGH:
                severity = Severity.HIGH
                reasons.append(f"Z-score {z:.2f} (more than 3 standard deviations)")
            elif abs(z) > Z_SCORE_MEDIUM:
                severity = Severity.MEDIUM
                reasons.append(f"Z-score {z:.2f} (more than 2 standard deviations)")

        if amount > upper_bound:
            reasons.append(f"Upper outlier (above IQR fence {upper_bound:,.0f})")
            if severity == Severity.LOW:
                severity = Severity.MEDIUM
        elif amount < lower_bound:
            reasons.append(f"Lower outlier (below IQR fence {lower_bound:,.0f})")
            if severity == Severity.LOW:
                severity = Severity.MEDIUM

        if amount > mean * LARGE_RATIO:
            reasons.append(f"Unusually large ({amount / mean:.1f}x the mean)")
            if severity == Severity.LOW:
                severity = Severity.MEDIUM

        if _is_round_amount(amount) and amount > mean:
            reasons.append(f"Round amount ({amount:,.0f})")

        if amount == max_amount and max_is_large:
            reasons.append(f"Equal to the population maximum ({max_amount:,.0f})")
            severity = Severity.HIGH

        results.append(
            AmountClassification(
                amount=amount, severity=severity, z_score=z, reasons=reasons
            )
        )

    return results


def detect_anomalies(
    rows: Sequence[LedgerRow], amount_type: AmountType
) -> AnomalyReport:
    """Run the anomaly tests over the rows with a positive amount.

    Args:
        rows: Ledger rows; rows with a zero amount under the policy are skipped
        amount_type: Amount-selection policy

    Returns:
        AnomalyReport listing rows with at least one reason, in original order
    """
    amounts = amounts_for(rows, amount_type)
    positions = [i for i, amount in enumerate(amounts) if amount > 0]
    report = AnomalyReport(amount_type=amount_type)
    if not positions:
        return report

    positive = amounts[positions]
    classifications = classify_amounts(positive)

    report.mean = float(positive.mean())
    report.std_dev = population_std_dev(positive, report.mean)
    report.q1, report.q3 = quartiles(np.sort(positive))
    report.max_amount = float(positive.max())

    for position, classification in zip(positions, classifications):
        if not classification.reasons:
            continue
        report.flags.append(
            AnomalyFlag(
                row=rows[position],
                position=position,
                amount=classification.amount,
                severity=classification.severity,
                z_score=classification.z_score,
                reasons=classification.reasons,
            )
        )

    logger.debug(
        f"Anomaly detection over {len(positions)} rows: {report.severity_counts()}"
    )
    return report


def detect_high_severity(
    rows: Sequence[LedgerRow], amount_type: AmountType
) -> List[LedgerRow]:
    """Rows classified high severity, in original order."""
    return detect_anomalies(rows, amount_type).high_severity_rows()

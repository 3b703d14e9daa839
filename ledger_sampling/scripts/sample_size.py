import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger("ledger_sampling.scripts.sample_size")

# MUS confidence factors (zero expected misstatement)
RISK_FACTORS: Dict[int, float] = {
    90: 2.31,
    95: 3.00,
    99: 4.61,
}
DEFAULT_CONFIDENCE_LEVEL = 95

# Count-based tiers: (max population count, sampling ratio)
COUNT_TIERS = (
    (500, 0.20),
    (1000, 0.10),
    (10000, 0.05),
)
COUNT_TIER_RATIO_ABOVE = 0.02
TIERED_MIN_SIZE = 50
TIERED_MAX_SIZE = 1000


@dataclass(frozen=True)
class SampleSizeRecommendation:
    """Result of the MUS sample size formula."""

    population_value: float
    materiality: float
    confidence_level: float
    risk_factor: float
    recommended_size: Optional[int]
    used_default: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.recommended_size is not None


def risk_factor_table() -> List[Dict[str, str]]:
    """Confidence level / audit risk / factor rows for display."""
    return [
        {
            "confidence_level": f"{level}%",
            "audit_risk": f"{100 - level}%",
            "factor": f"{factor:.2f}",
        }
        for level, factor in RISK_FACTORS.items()
    ]


def get_risk_factor(confidence_level: float) -> Optional[float]:
    """Look up the risk factor for a confidence level.

    Args:
        confidence_level: Confidence level as percentage (90, 95 or 99)

    Returns:
        Risk factor, or None for an unrecognized level
    """
    if confidence_level in RISK_FACTORS:
        return RISK_FACTORS[int(confidence_level)]
    return None


def estimate_sample_size(
    population_value: float,
    materiality: float,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    risk_factor: Optional[float] = None,
) -> SampleSizeRecommendation:
    """Calculate the MUS sample size from materiality and confidence.

    Formula: n = ceil(V x RF / M), floored at 1

    Where:
        - V = population monetary value
        - RF = risk factor for the confidence level (or a manual override)
        - M = materiality (tolerable error)

    The result is not clamped to the number of available rows;
    clamping belongs to the allocation step.

    Args:
        population_value: Population monetary total (>= 0)
        materiality: Materiality threshold (> 0)
        confidence_level: Confidence level as percentage (90, 95 or 99)
        risk_factor: Manual risk factor replacing the table value (optional)

    Returns:
        SampleSizeRecommendation. recommended_size is None when the
        materiality is not positive.
    """
    warnings = []
    used_default = False

    factor = get_risk_factor(confidence_level)
    if factor is None:
        warnings.append(
            f"Unrecognized confidence level {confidence_level}; "
            f"using the {DEFAULT_CONFIDENCE_LEVEL}% factor"
        )
        factor = RISK_FACTORS[DEFAULT_CONFIDENCE_LEVEL]
        used_default = True

    if risk_factor is not None:
        if risk_factor > 0:
            factor = float(risk_factor)
        else:
            warnings.append(
                f"Ignoring non-positive risk factor {risk_factor}; using {factor:.2f}"
            )

    population_value = max(0.0, float(population_value or 0.0))

    if materiality is None or materiality <= 0:
        warnings.append("Materiality must be greater than 0; no size calculated")
        for message in warnings:
            logger.warning(message)
        return SampleSizeRecommendation(
            population_value=population_value,
            materiality=materiality or 0.0,
            confidence_level=confidence_level,
            risk_factor=RISK_FACTORS[DEFAULT_CONFIDENCE_LEVEL],
            recommended_size=None,
            used_default=True,
            warnings=warnings,
        )

    size = max(1, math.ceil(population_value * factor / materiality))

    for message in warnings:
        logger.warning(message)

    return SampleSizeRecommendation(
        population_value=population_value,
        materiality=float(materiality),
        confidence_level=confidence_level,
        risk_factor=factor,
        recommended_size=size,
        used_default=used_default,
        warnings=warnings,
    )


def suggest_sample_size_by_count(total_count: int) -> int:
    """Suggest a sample size from the number of rows alone.

    20% up to 500 rows, 10% up to 1,000, 5% up to 10,000 and 2% beyond,
    bounded to [50, 1000].

    Args:
        total_count: Number of rows in the population

    Returns:
        Suggested sample size
    """
    ratio = COUNT_TIER_RATIO_ABOVE
    for max_count, tier_ratio in COUNT_TIERS:
        if total_count <= max_count:
            ratio = tier_ratio
            break

    calculated = math.floor(total_count * ratio)
    return min(max(calculated, TIERED_MIN_SIZE), TIERED_MAX_SIZE)

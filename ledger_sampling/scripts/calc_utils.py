import math
from typing import Optional, Tuple

import numpy as np


def population_std_dev(amounts: np.ndarray, mean: Optional[float] = None) -> float:
    """Calculate the population standard deviation (divides by n, not n-1).

    Args:
        amounts: Array of amounts
        mean: Precomputed mean (optional)

    Returns:
        Standard deviation, exactly 0.0 when all amounts are equal
    """
    if amounts.size == 0:
        return 0.0

    # identical values can leave a rounding residue in np.std
    if amounts.max() == amounts.min():
        return 0.0

    if mean is None:
        mean = float(amounts.mean())
    variance = float(np.mean((amounts - mean) ** 2))
    return math.sqrt(variance)


def quartiles(sorted_amounts: np.ndarray) -> Tuple[float, float]:
    """Return (Q1, Q3) as order statistics of an ascending array.

    Q1 = sorted[floor(n * 0.25)], Q3 = sorted[floor(n * 0.75)]. No
    interpolation is done.

    Raises:
        ValueError: If the array is empty
    """
    n = sorted_amounts.size
    if n == 0:
        raise ValueError("Cannot compute quartiles of an empty array")

    q1 = float(sorted_amounts[math.floor(n * 0.25)])
    q3 = float(sorted_amounts[math.floor(n * 0.75)])
    return q1, q3


def iqr_bounds(q1: float, q3: float, k: float = 1.5) -> Tuple[float, float]:
    """Outlier fences [Q1 - k*IQR, Q3 + k*IQR]."""
    iqr = q3 - q1
    return q1 - k * iqr, q3 + k * iqr


def z_score(value: float, mean: float, std_dev: float) -> Optional[float]:
    """Signed distance from the mean in standard deviations.

    Returns None when the standard deviation is zero.
    """
    if std_dev <= 0:
        return None
    return (value - mean) / std_dev

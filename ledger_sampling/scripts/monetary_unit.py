import logging

import numpy as np

logger = logging.getLogger("ledger_sampling.scripts.monetary_unit")


class NoEligibleAmountError(ValueError):
    """Raised when a pool has no positive amount to sample from."""


def monetary_unit_indices(
    amounts: np.ndarray, sample_size: int, rng: np.random.Generator
) -> np.ndarray:
    """Select rows with probability proportional to their amount.

    Each currency unit is a sampling unit. With T the total amount and n the
    sample size the sampling interval is J = T / n. One random offset r is
    drawn from [0, J) and the targets are r, r + J, ..., r + (n - 1) x J. For
    each target the first row whose cumulative amount reaches the target is
    selected, found by binary search over the cumulative sums.

    A row larger than J can absorb several targets, so fewer than n unique
    rows may come back. That is the expected behavior of probability
    proportional to size sampling; callers must treat the returned count as
    authoritative.

    Args:
        amounts: Non-negative amounts of the pool, in original order
        sample_size: Requested number of rows
        rng: Random generator

    Returns:
        Ascending array of unique selected indices

    Raises:
        NoEligibleAmountError: If the amounts sum to zero
    """
    size = min(max(sample_size, 0), amounts.size)
    if size == 0:
        return np.empty(0, dtype=int)

    cumulative = np.cumsum(amounts)
    total = float(cumulative[-1])
    if total <= 0:
        raise NoEligibleAmountError("No eligible amount to sample")

    sampling_interval = total / size
    offset = float(rng.uniform(0.0, sampling_interval))
    targets = offset + np.arange(size) * sampling_interval

    indices = np.searchsorted(cumulative, targets, side="left")
    indices = np.minimum(indices, amounts.size - 1)

    # targets ascend, so the hits already come out sorted
    selected = np.unique(indices)
    if selected.size < size:
        logger.debug(
            f"MUS selected {selected.size} unique rows for {size} targets "
            f"(interval {sampling_interval:,.2f})"
        )
    return selected

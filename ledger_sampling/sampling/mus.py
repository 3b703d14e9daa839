"""Monetary Unit Sampling (MUS) strategy implementation.

MUS treats every currency unit as a sampling unit, so a transaction is
selected with probability proportional to its amount. Large transactions are
reviewed more often, which is why MUS is the usual choice for substantive
audit testing.
"""

import logging
from typing import List

import numpy as np

from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.types import SamplingMethod
from ledger_sampling.scripts.monetary_unit import monetary_unit_indices

logger = logging.getLogger("ledger_sampling.sampling.mus")


class MonetaryUnitSamplingStrategy(SamplingStrategy):
    """Strategy for monetary unit sampling.

    MUS is ideal when:
    - Overstatement of large balances is the main risk
    - A materiality threshold drives the sample size

    Note: a row larger than the sampling interval can absorb several
    selection points, so the sample may hold fewer rows than requested.
    """

    @property
    def method(self) -> SamplingMethod:
        return SamplingMethod.MUS

    @property
    def display_name(self) -> str:
        return "MUS"

    @property
    def description(self) -> str:
        return (
            "Select rows weighted by amount so larger transactions are more "
            "likely to be reviewed. Widely used in financial statement audits."
        )

    @property
    def may_under_yield(self) -> bool:
        return True

    def validate_inputs(self, pool, amounts, size) -> List[str]:
        """Validate inputs for monetary unit sampling."""
        errors = super().validate_inputs(pool, amounts, size)

        if amounts.size and np.any(amounts < 0):
            errors.append("Amounts must not be negative")

        return errors

    def select_indices(self, pool, amounts, size, rng) -> np.ndarray:
        return monetary_unit_indices(amounts, size, rng)

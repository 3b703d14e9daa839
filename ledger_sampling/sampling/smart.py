"""Smart (composite) sampling strategy implementation.

Combines judgmental and statistical selection: the largest and most recent
transactions, statistical outliers, an even spread over the months and a
random remainder. Pair it with the ACCOUNT amount policy to rank rows by the
side that is natural for their account (debit for assets and expenses,
credit for liabilities, equity and revenue).
"""

import logging

import numpy as np

from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.types import SamplingMethod
from ledger_sampling.scripts.smart_sample import smart_sample_indices

logger = logging.getLogger("ledger_sampling.sampling.smart")


class SmartSamplingStrategy(SamplingStrategy):
    """Strategy for composite smart sampling.

    Smart sampling is ideal when:
    - A reviewer wants coverage of large, recent and unusual entries
    - The ledger spans several months that should all be represented
    """

    @property
    def method(self) -> SamplingMethod:
        return SamplingMethod.SMART

    @property
    def display_name(self) -> str:
        return "Smart"

    @property
    def description(self) -> str:
        return (
            "Combine the largest, most recent and outlying transactions with "
            "an even monthly spread and a random share."
        )

    def select_indices(self, pool, amounts, size, rng) -> np.ndarray:
        return smart_sample_indices(amounts, [row.date for row in pool], size, rng)

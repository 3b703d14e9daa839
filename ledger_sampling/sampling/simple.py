"""Simple random sampling strategy implementation.

Simple random sampling gives every eligible row an equal probability of
being selected. This is the most basic sampling method and serves as the
baseline for comparison with the other methods.
"""

import logging

import numpy as np

from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.types import SamplingMethod
from ledger_sampling.scripts.simple_random import draw_random_indices

logger = logging.getLogger("ledger_sampling.sampling.simple")


class RandomSamplingStrategy(SamplingStrategy):
    """Strategy for simple random sampling.

    Simple random sampling is ideal when:
    - Every transaction matters equally regardless of its amount
    - No ordering or seasonality in the ledger needs to be covered
    """

    @property
    def method(self) -> SamplingMethod:
        return SamplingMethod.RANDOM

    @property
    def display_name(self) -> str:
        return "Random"

    @property
    def description(self) -> str:
        return (
            "Select rows at random with equal probability. Gives an unbiased "
            "sample and is the statistical baseline."
        )

    def select_indices(self, pool, amounts, size, rng) -> np.ndarray:
        return draw_random_indices(amounts.size, size, rng)

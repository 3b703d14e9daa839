"""Systematic sampling strategy implementation.

Systematic sampling takes every k-th row of the ledger after one random
start. This spreads the sample evenly over the ledger order, which is
usually chronological.
"""

import logging

import numpy as np

from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.types import SamplingMethod
from ledger_sampling.scripts.systematic import systematic_indices

logger = logging.getLogger("ledger_sampling.sampling.systematic")


class SystematicSamplingStrategy(SamplingStrategy):
    """Strategy for systematic sampling.

    Systematic sampling is ideal when:
    - The ledger is ordered in time and every period should be covered
    - A reviewer needs a sample that is easy to re-perform
    """

    @property
    def method(self) -> SamplingMethod:
        return SamplingMethod.SYSTEMATIC

    @property
    def display_name(self) -> str:
        return "Systematic"

    @property
    def description(self) -> str:
        return (
            "Select rows at a fixed interval from a random start. Represents "
            "the whole population evenly and suits chronologically ordered data."
        )

    def select_indices(self, pool, amounts, size, rng) -> np.ndarray:
        return systematic_indices(amounts.size, size, rng)

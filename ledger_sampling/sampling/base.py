"""Base class for sampling strategies.

Defines the interface that all sampling strategies must implement.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

from ledger_sampling.model.ledger import LedgerRow
from ledger_sampling.sampling.types import SamplingMethod

logger = logging.getLogger("ledger_sampling.sampling")


class SamplingStrategy(ABC):
    """Abstract base class for sampling strategies.

    Each sampling method (random, systematic, MUS) implements this interface.
    Strategies hold no state between calls; all randomness comes from the
    generator passed to select().
    """

    @property
    @abstractmethod
    def method(self) -> SamplingMethod:
        """Return the sampling method this strategy handles."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for this sampling method."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of when to use this sampling method."""
        pass

    @property
    def may_under_yield(self) -> bool:
        """Whether fewer rows than min(size, pool) may legitimately be returned."""
        return False

    @abstractmethod
    def select_indices(
        self,
        pool: Sequence[LedgerRow],
        amounts: np.ndarray,
        size: int,
        rng: np.random.Generator,
    ) -> np.ndarray:
        """Select positions in the pool.

        Args:
            pool: Eligible rows
            amounts: Amounts of the pool rows, in pool order
            size: Requested number of rows (clamped to the pool size)
            rng: Random generator

        Returns:
            Array of distinct pool positions
        """
        pass

    def validate_inputs(
        self, pool: Sequence[LedgerRow], amounts: np.ndarray, size: int
    ) -> List[str]:
        """Validate inputs for this sampling method.

        Args:
            pool: Eligible rows
            amounts: Amounts aligned with the pool
            size: Requested number of rows

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if len(pool) != amounts.size:
            errors.append("Amounts must be aligned with the pool")

        if size < 0:
            errors.append("Sample size must not be negative")

        return errors

    def select(
        self,
        pool: Sequence[LedgerRow],
        amounts: np.ndarray,
        size: int,
        rng: np.random.Generator,
    ) -> List[LedgerRow]:
        """Select up to size rows from the pool.

        Args:
            pool: Eligible rows
            amounts: Amounts aligned with the pool
            size: Requested number of rows
            rng: Random generator

        Returns:
            Selected rows

        Raises:
            ValueError: If the inputs are invalid
        """
        errors = self.validate_inputs(pool, amounts, size)
        if errors:
            raise ValueError("; ".join(errors))

        size = min(size, len(pool))
        if size == 0:
            return []

        indices = self.select_indices(pool, amounts, size, rng)
        logger.debug(
            f"{self.display_name}: {len(indices)} of {len(pool)} rows selected "
            f"(requested {size})"
        )
        return [pool[int(i)] for i in indices]

    def is_ready(
        self, pool: Sequence[LedgerRow], amounts: np.ndarray, size: int
    ) -> bool:
        """Check if inputs are ready for selection."""
        errors = self.validate_inputs(pool, amounts, size)
        return len(errors) == 0

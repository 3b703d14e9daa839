"""Sampling service for orchestrating audit sampling runs.

This module provides the main entry points for the UI and export layers to
interact with the sampling strategies.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Type

import numpy as np

from ledger_sampling.model.ledger import LedgerRow
from ledger_sampling.sampling.allocation import allocate_sample
from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.mus import MonetaryUnitSamplingStrategy
from ledger_sampling.sampling.simple import RandomSamplingStrategy
from ledger_sampling.sampling.smart import SmartSamplingStrategy
from ledger_sampling.sampling.systematic import SystematicSamplingStrategy
from ledger_sampling.sampling.types import (
    SampleSizeMode,
    SamplingConfig,
    SamplingMethod,
    SamplingResults,
)
from ledger_sampling.scripts.population import (
    PopulationMetrics,
    compute_population_metrics,
)
from ledger_sampling.scripts.sample_size import (
    SampleSizeRecommendation,
    estimate_sample_size,
    suggest_sample_size_by_count,
)

logger = logging.getLogger("ledger_sampling.sampling.service")

# Registry of available strategies
_STRATEGY_REGISTRY: Dict[SamplingMethod, Type[SamplingStrategy]] = {
    SamplingMethod.RANDOM: RandomSamplingStrategy,
    SamplingMethod.SYSTEMATIC: SystematicSamplingStrategy,
    SamplingMethod.MUS: MonetaryUnitSamplingStrategy,
    SamplingMethod.SMART: SmartSamplingStrategy,
}

# Cached strategy instances (strategies are stateless)
_strategy_instances: Dict[SamplingMethod, SamplingStrategy] = {}


def get_sampling_strategy(method: SamplingMethod) -> SamplingStrategy:
    """Get the sampling strategy for a given method.

    Args:
        method: The sampling method

    Returns:
        The corresponding SamplingStrategy instance

    Raises:
        ValueError: If the method is not supported
    """
    if method not in _STRATEGY_REGISTRY:
        raise ValueError(f"Unsupported sampling method: {method}")

    if method not in _strategy_instances:
        _strategy_instances[method] = _STRATEGY_REGISTRY[method]()

    return _strategy_instances[method]


def get_strategy_from_string(method_str: str) -> SamplingStrategy:
    """Get sampling strategy from string method name.

    Args:
        method_str: String name of sampling method (e.g., "mus")

    Returns:
        The corresponding SamplingStrategy instance
    """
    method = SamplingMethod.from_string(method_str)
    return get_sampling_strategy(method)


class SamplingService:
    """High-level service for audit sampling.

    This service provides a simplified interface for the UI layer, turning a
    SamplingConfig and a row collection into one SamplingResults.
    """

    @staticmethod
    def recommend_sample_size(
        metrics: PopulationMetrics, config: SamplingConfig
    ) -> SampleSizeRecommendation:
        """Run the MUS size formula on the population monetary total."""
        return estimate_sample_size(
            population_value=metrics.total_amount,
            materiality=config.materiality,
            confidence_level=config.confidence_level,
            risk_factor=config.risk_factor,
        )

    @staticmethod
    def resolve_sample_size(
        metrics: PopulationMetrics, config: SamplingConfig
    ) -> Tuple[int, Optional[SampleSizeRecommendation], List[str]]:
        """Work out the requested sample size for a config.

        The returned size is not clamped to the population.

        Args:
            metrics: Population metrics under the config's amount policy
            config: Sampling configuration

        Returns:
            Tuple of (requested size, recommendation or None, warnings)
        """
        warnings = []

        if config.sample_size_mode == SampleSizeMode.TIERED:
            return suggest_sample_size_by_count(metrics.eligible_row_count), None, []

        if config.sample_size_mode == SampleSizeMode.FORMULA:
            recommendation = SamplingService.recommend_sample_size(metrics, config)
            warnings.extend(recommendation.warnings)
            if recommendation.is_available and metrics.total_amount > 0:
                return recommendation.recommended_size, recommendation, warnings

            warnings.append(
                f"Formula sample size unavailable; using the manual size "
                f"{config.sample_size}"
            )
            return config.sample_size, recommendation, warnings

        return config.sample_size, None, warnings

    @staticmethod
    def validate(config: SamplingConfig) -> List[str]:
        """Get validation errors for a config."""
        errors = config.validate()
        if config.sampling_method not in _STRATEGY_REGISTRY:
            errors.append(f"Unsupported sampling method: {config.sampling_method}")
        return errors

    @staticmethod
    def run(
        rows: Sequence[LedgerRow],
        config: SamplingConfig,
        rng: Optional[np.random.Generator] = None,
    ) -> SamplingResults:
        """Select an audit sample.

        Args:
            rows: Normalized ledger rows of one account
            config: Sampling configuration
            rng: Random generator; created from config.seed when omitted

        Returns:
            SamplingResults. Data conditions (no rows, no eligible amount,
            under-yield) are reported through the status and warnings, an
            invalid config through success=False.
        """
        errors = SamplingService.validate(config)
        if errors:
            logger.warning(f"Invalid sampling config: {errors}")
            return SamplingResults.error(config, "; ".join(errors))

        if rng is None:
            rng = np.random.default_rng(config.seed)

        try:
            metrics = compute_population_metrics(rows, config.amount_type)
            requested_size, recommendation, warnings = (
                SamplingService.resolve_sample_size(metrics, config)
            )

            strategy = get_sampling_strategy(config.sampling_method)
            allocation = allocate_sample(
                rows=rows,
                requested_size=requested_size,
                strategy=strategy,
                amount_type=config.amount_type,
                include_anomalies=config.include_anomalies,
                rng=rng,
            )

            logger.info(
                f"{strategy.display_name} sampling: {len(allocation.samples)} rows "
                f"selected ({allocation.anomaly_count} anomalies) of "
                f"{metrics.eligible_row_count} eligible, status "
                f"{allocation.status.value}"
            )

            return SamplingResults(
                config=config,
                success=True,
                metrics=metrics,
                recommendation=recommendation,
                requested_size=requested_size,
                allocation=allocation,
                warnings=config.warnings() + warnings + allocation.warnings,
            )

        except ValueError as e:
            logger.error(f"Error in audit sampling: {e}")
            return SamplingResults.error(config, str(e))

    @staticmethod
    def get_available_methods() -> list:
        """Get list of available sampling methods.

        Returns:
            List of (method_value, display_name, description) tuples
        """
        methods = []
        for method in SamplingMethod:
            strategy = get_sampling_strategy(method)
            methods.append((method.value, strategy.display_name, strategy.description))
        return methods

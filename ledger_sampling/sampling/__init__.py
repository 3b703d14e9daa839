"""Sampling strategies module.

This module provides the audit sampling methods and the allocation of a
sample between forced anomalies and a sampling strategy. Each sampling
method is implemented as a Strategy class that handles:
- Input validation
- Index selection from an injected random generator

Usage:
    from ledger_sampling.sampling import SamplingConfig, SamplingService

    config = SamplingConfig(sampling_method="mus", include_anomalies=True)
    results = SamplingService.run(rows, config)
"""

from ledger_sampling.sampling.allocation import allocate_sample
from ledger_sampling.sampling.base import SamplingStrategy
from ledger_sampling.sampling.service import (
    SamplingService,
    get_sampling_strategy,
    get_strategy_from_string,
)
from ledger_sampling.sampling.types import (
    AllocationResult,
    SampledRow,
    SampleOrigin,
    SampleSizeMode,
    SampleStatus,
    SamplingConfig,
    SamplingMethod,
    SamplingResults,
)

__all__ = [
    "SamplingStrategy",
    "SamplingMethod",
    "SampleSizeMode",
    "SampleOrigin",
    "SampleStatus",
    "SamplingConfig",
    "SampledRow",
    "AllocationResult",
    "SamplingResults",
    "SamplingService",
    "allocate_sample",
    "get_sampling_strategy",
    "get_strategy_from_string",
]

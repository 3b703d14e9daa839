"""Ledger sampling scripts package.

Contains the calculation functions behind the sampling strategies.
"""

from .anomaly import (
    AnomalyFlag,
    AnomalyReport,
    Severity,
    classify_amounts,
    detect_anomalies,
    detect_high_severity,
)
from .export import (
    build_anomaly_summary,
    build_sample_frame,
    export_sample_to_csv,
    rows_from_frame,
)
from .logger import setup_logging
from .monetary_unit import NoEligibleAmountError, monetary_unit_indices
from .population import (
    AmountStatistics,
    PopulationMetrics,
    compute_population_metrics,
    describe_amounts,
    summarize_population,
)
from .sample_size import (
    SampleSizeRecommendation,
    estimate_sample_size,
    risk_factor_table,
    suggest_sample_size_by_count,
)
from .simple_random import draw_random_indices
from .smart_sample import smart_quotas, smart_sample_indices
from .systematic import systematic_indices

__all__ = [
    # Population
    "PopulationMetrics",
    "AmountStatistics",
    "compute_population_metrics",
    "describe_amounts",
    "summarize_population",
    # Sample size
    "SampleSizeRecommendation",
    "estimate_sample_size",
    "risk_factor_table",
    "suggest_sample_size_by_count",
    # Anomalies
    "Severity",
    "AnomalyFlag",
    "AnomalyReport",
    "classify_amounts",
    "detect_anomalies",
    "detect_high_severity",
    # Selection
    "draw_random_indices",
    "systematic_indices",
    "monetary_unit_indices",
    "smart_sample_indices",
    "smart_quotas",
    "NoEligibleAmountError",
    # Export
    "rows_from_frame",
    "build_sample_frame",
    "build_anomaly_summary",
    "export_sample_to_csv",
    # Logging
    "setup_logging",
]

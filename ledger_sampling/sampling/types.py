"""Type definitions for audit sampling.

Contains the configuration surface accepted from callers and the data classes
returned by the allocation and service layers. This provides a clear contract
between the UI/export layers and the sampling logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import tomli

from ledger_sampling.model.ledger import AmountType, LedgerRow
from ledger_sampling.scripts.anomaly import Severity
from ledger_sampling.scripts.population import PopulationMetrics
from ledger_sampling.scripts.sample_size import (
    RISK_FACTORS,
    SampleSizeRecommendation,
)


class SamplingMethod(Enum):
    """Available sampling methods."""

    RANDOM = "random"
    SYSTEMATIC = "systematic"
    MUS = "mus"
    SMART = "smart"

    @classmethod
    def from_string(cls, value: str) -> "SamplingMethod":
        """Convert string to SamplingMethod enum."""
        for method in cls:
            if method.value == value.lower():
                return method
        raise ValueError(f"Unknown sampling method: {value}")


class SampleSizeMode(Enum):
    """How the requested sample size is obtained."""

    MANUAL = "manual"
    FORMULA = "formula"
    TIERED = "tiered"

    @classmethod
    def from_string(cls, value: str) -> "SampleSizeMode":
        """Convert string to SampleSizeMode enum."""
        for mode in cls:
            if mode.value == value.lower():
                return mode
        raise ValueError(f"Unknown sample size mode: {value}")


class SampleOrigin(Enum):
    """Why a row is in the sample."""

    ANOMALY = "anomaly"
    SAMPLING = "sampling"


class SampleStatus(Enum):
    """Overall outcome of a sampling run."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    NO_DATA = "no_data"
    NO_ELIGIBLE_AMOUNT = "no_eligible_amount"


@dataclass
class SamplingConfig:
    """Sampling parameters owned by the caller.

    Enum-valued fields also accept their string values.
    """

    amount_type: AmountType = AmountType.BOTH
    sampling_method: SamplingMethod = SamplingMethod.RANDOM
    sample_size_mode: SampleSizeMode = SampleSizeMode.MANUAL
    sample_size: int = 30  # Manual sample size
    materiality: Optional[float] = None
    confidence_level: float = 95.0  # As percentage (90, 95 or 99)
    include_anomalies: bool = False
    risk_factor: Optional[float] = None  # Manual override of the table factor
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.amount_type, str):
            self.amount_type = AmountType.from_string(self.amount_type)
        if isinstance(self.sampling_method, str):
            self.sampling_method = SamplingMethod.from_string(self.sampling_method)
        if isinstance(self.sample_size_mode, str):
            self.sample_size_mode = SampleSizeMode.from_string(self.sample_size_mode)

    def validate(self) -> List[str]:
        """Validate the configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        # formula mode falls back to the manual size when no size can be computed
        if self.sample_size_mode in (SampleSizeMode.MANUAL, SampleSizeMode.FORMULA):
            if self.sample_size is None or self.sample_size < 1:
                errors.append("Sample size must be at least 1")

        if self.sample_size_mode == SampleSizeMode.FORMULA:
            if self.materiality is None:
                errors.append("Materiality is required for the formula sample size")

        if self.risk_factor is not None and self.risk_factor <= 0:
            errors.append("Risk factor must be greater than 0")

        return errors

    def warnings(self) -> List[str]:
        """Non-blocking remarks about settings the chosen mode ignores.

        Formula inputs (unknown confidence level, non-positive materiality)
        are reported by the estimator itself.
        """
        if self.sample_size_mode == SampleSizeMode.FORMULA:
            return []

        mode = self.sample_size_mode.value
        messages = []
        if self.materiality is not None:
            messages.append(f"Materiality is ignored in {mode} sample size mode")
        if self.risk_factor is not None:
            messages.append(f"Risk factor is ignored in {mode} sample size mode")
        if self.confidence_level not in RISK_FACTORS:
            messages.append(
                f"Confidence level {self.confidence_level} is not in the risk "
                "factor table"
            )
        return messages

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SamplingConfig":
        """Create a config from caller settings, ignoring unknown keys."""
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def from_toml(cls, path: Union[str, Path]) -> "SamplingConfig":
        """Load a config from the [sampling] table of a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Sampling config not found at {path}")

        with path.open("rb") as f:
            data = tomli.load(f)

        return cls.from_mapping(data.get("sampling", data))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount_type": self.amount_type.value,
            "sampling_method": self.sampling_method.value,
            "sample_size_mode": self.sample_size_mode.value,
            "sample_size": self.sample_size,
            "materiality": self.materiality,
            "confidence_level": self.confidence_level,
            "include_anomalies": self.include_anomalies,
            "risk_factor": self.risk_factor,
            "seed": self.seed,
        }


@dataclass(frozen=True)
class SampledRow:
    """A row selected for audit testing."""

    row: LedgerRow
    origin: SampleOrigin
    method: SamplingMethod
    severity: Optional[Severity] = None

    @property
    def is_anomaly(self) -> bool:
        return self.origin == SampleOrigin.ANOMALY


@dataclass
class AllocationResult:
    """Output of the allocation coordinator."""

    method: SamplingMethod
    requested_size: int
    samples: List[SampledRow] = field(default_factory=list)
    status: SampleStatus = SampleStatus.COMPLETE
    eligible_count: int = 0
    anomaly_candidates: int = 0  # High severity rows found before slicing
    clamped: bool = False  # Requested size exceeded the eligible pool
    under_yield: bool = False  # Fewer unique rows than could be returned
    warnings: List[str] = field(default_factory=list)

    @property
    def anomaly_count(self) -> int:
        return sum(1 for sample in self.samples if sample.is_anomaly)

    @property
    def sampling_count(self) -> int:
        return len(self.samples) - self.anomaly_count

    @property
    def rows(self) -> List[LedgerRow]:
        return [sample.row for sample in self.samples]


@dataclass
class SamplingResults:
    """Results from a full sampling run.

    Carries everything the export and UI collaborators need: the metrics,
    the size recommendation (formula mode only) and the tagged sample.
    """

    config: SamplingConfig
    success: bool = True
    error_message: Optional[str] = None

    metrics: Optional[PopulationMetrics] = None
    recommendation: Optional[SampleSizeRecommendation] = None
    requested_size: int = 0
    allocation: Optional[AllocationResult] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def samples(self) -> List[SampledRow]:
        return self.allocation.samples if self.allocation else []

    @property
    def status(self) -> SampleStatus:
        if self.allocation is None:
            return SampleStatus.NO_DATA
        return self.allocation.status

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to a plain dictionary (rows are not included)."""
        result = {
            "config": self.config.to_dict(),
            "success": self.success,
            "error_message": self.error_message,
            "status": self.status.value,
            "requested_size": self.requested_size,
            "sample_count": len(self.samples),
            "warnings": list(self.warnings),
        }

        if self.metrics is not None:
            result["metrics"] = {
                "row_count": self.metrics.row_count,
                "eligible_row_count": self.metrics.eligible_row_count,
                "total_amount": self.metrics.total_amount,
            }
        else:
            result["metrics"] = None

        if self.recommendation is not None:
            result["recommendation"] = {
                "recommended_size": self.recommendation.recommended_size,
                "risk_factor": self.recommendation.risk_factor,
                "confidence_level": self.recommendation.confidence_level,
                "materiality": self.recommendation.materiality,
                "used_default": self.recommendation.used_default,
            }
        else:
            result["recommendation"] = None

        if self.allocation is not None:
            result["anomaly_count"] = self.allocation.anomaly_count
            result["sampling_count"] = self.allocation.sampling_count
            result["clamped"] = self.allocation.clamped
            result["under_yield"] = self.allocation.under_yield
        else:
            result["anomaly_count"] = 0
            result["sampling_count"] = 0
            result["clamped"] = False
            result["under_yield"] = False

        return result

    @classmethod
    def error(cls, config: SamplingConfig, message: str) -> "SamplingResults":
        """Create an error result."""
        return cls(
            config=config,
            success=False,
            error_message=message,
        )

"""Unit tests for the sampling service"""

import numpy as np
import pytest

from ledger_sampling.sampling import (
    SampleStatus,
    SamplingConfig,
    SamplingMethod,
    SamplingService,
)
from ledger_sampling.scripts.population import compute_population_metrics


def test_manual_mode_selects_requested_size(ledger_rows):
    config = SamplingConfig(sample_size=12, seed=7)
    results = SamplingService.run(ledger_rows, config)

    assert results.success is True
    assert results.requested_size == 12
    assert len(results.samples) == 12
    assert results.status == SampleStatus.COMPLETE
    assert results.recommendation is None


def test_formula_mode_uses_recommendation(make_rows):
    rows = make_rows([1000.0] * 200)
    config = SamplingConfig(
        sample_size_mode="formula",
        materiality=20_000,
        confidence_level=95,
        seed=1,
    )
    results = SamplingService.run(rows, config)

    # 200,000 x 3.00 / 20,000
    assert results.recommendation.recommended_size == 30
    assert results.requested_size == 30
    assert len(results.samples) == 30


def test_formula_mode_falls_back_to_manual_size(make_rows):
    rows = make_rows([1000.0] * 50)
    config = SamplingConfig(
        sample_size_mode="formula", materiality=0, sample_size=8, seed=1
    )
    results = SamplingService.run(rows, config)

    assert results.success is True
    assert results.recommendation.is_available is False
    assert results.requested_size == 8
    assert any("manual size 8" in message for message in results.warnings)


def test_tiered_mode_uses_eligible_row_count(make_rows):
    rows = make_rows([100.0] * 800 + [0.0] * 50)
    config = SamplingConfig(sample_size_mode="tiered", seed=2)
    metrics = compute_population_metrics(rows, config.amount_type)

    size, recommendation, warnings = SamplingService.resolve_sample_size(
        metrics, config
    )

    assert size == 80
    assert recommendation is None
    assert warnings == []


def test_invalid_config_returns_error_result(ledger_rows):
    config = SamplingConfig(sample_size=0)
    results = SamplingService.run(ledger_rows, config)

    assert results.success is False
    assert "at least 1" in results.error_message
    assert results.samples == []
    assert results.to_dict()["success"] is False


def test_formula_mode_without_materiality_is_invalid(ledger_rows):
    config = SamplingConfig(sample_size_mode="formula")
    results = SamplingService.run(ledger_rows, config)

    assert results.success is False
    assert "Materiality" in results.error_message


def test_empty_population_reports_no_data():
    results = SamplingService.run([], SamplingConfig(seed=3))

    assert results.success is True
    assert results.status == SampleStatus.NO_DATA
    assert results.samples == []
    assert "No data to sample" in results.warnings


def test_same_seed_gives_same_sample(ledger_rows):
    config = SamplingConfig(sampling_method="mus", sample_size=15, seed=42)

    first = SamplingService.run(ledger_rows, config)
    second = SamplingService.run(ledger_rows, config)

    assert [id(row) for row in first.allocation.rows] == [
        id(row) for row in second.allocation.rows
    ]


def test_injected_generator_is_used(ledger_rows):
    config = SamplingConfig(sample_size=10)

    first = SamplingService.run(ledger_rows, config, rng=np.random.default_rng(5))
    second = SamplingService.run(ledger_rows, config, rng=np.random.default_rng(5))

    assert first.allocation.rows == second.allocation.rows


def test_anomalies_lead_the_sample(ledger_rows):
    config = SamplingConfig(
        sampling_method="systematic",
        sample_size=6,
        include_anomalies=True,
        seed=11,
    )
    results = SamplingService.run(ledger_rows, config)

    assert len(results.samples) == 6
    assert [s.row for s in results.samples[:2]] == [ledger_rows[17], ledger_rows[64]]
    assert all(not s.is_anomaly for s in results.samples[2:])
    assert all(s.method == SamplingMethod.SYSTEMATIC for s in results.samples)


def test_to_dict(ledger_rows):
    config = SamplingConfig(sample_size=5, include_anomalies=True, seed=9)
    data = SamplingService.run(ledger_rows, config).to_dict()

    assert data["config"]["sampling_method"] == "random"
    assert data["status"] == "complete"
    assert data["sample_count"] == 5
    assert data["anomaly_count"] == 2
    assert data["sampling_count"] == 3
    assert data["metrics"]["row_count"] == 120
    assert data["recommendation"] is None


def test_get_available_methods():
    methods = SamplingService.get_available_methods()

    assert [method[0] for method in methods] == ["random", "systematic", "mus", "smart"]
    assert [method[1] for method in methods] == ["Random", "Systematic", "MUS", "Smart"]


@pytest.mark.parametrize("sample_size", [None, 0])
def test_formula_fallback_without_sample_size_is_invalid(make_rows, sample_size):
    rows = make_rows([1000.0] * 50)
    config = SamplingConfig(
        sample_size_mode="formula", materiality=-1, sample_size=sample_size
    )
    results = SamplingService.run(rows, config)

    assert results.success is False
    assert "at least 1" in results.error_message
    assert results.samples == []


def test_config_warnings_are_reported(ledger_rows):
    config = SamplingConfig(sample_size=5, materiality=10_000, seed=4)
    results = SamplingService.run(ledger_rows, config)

    assert results.success is True
    assert results.warnings[0] == "Materiality is ignored in manual sample size mode"


def test_smart_sampling_covers_largest_entries(ledger_rows):
    config = SamplingConfig(sampling_method="smart", sample_size=20, seed=11)
    results = SamplingService.run(ledger_rows, config)

    selected = {id(row) for row in results.allocation.rows}
    assert len(results.samples) == 20
    assert len(selected) == 20
    assert id(ledger_rows[17]) in selected
    assert id(ledger_rows[64]) in selected
    assert all(s.method == SamplingMethod.SMART for s in results.samples)

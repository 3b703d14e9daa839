"""Unit tests for the allocation coordinator"""

import numpy as np
import pytest

from ledger_sampling.model.ledger import AmountType, eligible_rows
from ledger_sampling.sampling import SampleOrigin, SampleStatus, SamplingMethod
from ledger_sampling.sampling.allocation import allocate_sample
from ledger_sampling.sampling.service import get_sampling_strategy
from ledger_sampling.scripts.anomaly import Severity, detect_high_severity


def test_anomaly_fills_part_of_the_budget(skewed_rows, rng):
    """One anomaly plus two strategy rows for a size 3 request"""
    result = allocate_sample(
        skewed_rows,
        3,
        get_sampling_strategy(SamplingMethod.RANDOM),
        AmountType.DEBIT,
        include_anomalies=True,
        rng=rng,
    )

    assert len(result.samples) == 3
    assert result.anomaly_count == 1
    assert result.sampling_count == 2
    assert result.samples[0].row is skewed_rows[-1]
    assert result.samples[0].origin == SampleOrigin.ANOMALY
    assert result.samples[0].severity == Severity.HIGH
    assert all(s.row is not skewed_rows[-1] for s in result.samples[1:])
    assert result.status == SampleStatus.COMPLETE


def test_without_anomaly_inclusion_every_row_is_sampled(skewed_rows, rng):
    result = allocate_sample(
        skewed_rows,
        10,
        get_sampling_strategy(SamplingMethod.SYSTEMATIC),
        AmountType.DEBIT,
        include_anomalies=False,
        rng=rng,
    )

    assert len(result.samples) == 10
    assert result.anomaly_count == 0
    assert all(s.origin == SampleOrigin.SAMPLING for s in result.samples)
    assert all(s.method == SamplingMethod.SYSTEMATIC for s in result.samples)


def test_anomalies_beyond_budget_are_truncated(ledger_rows, rng):
    result = allocate_sample(
        ledger_rows,
        1,
        get_sampling_strategy(SamplingMethod.MUS),
        AmountType.BOTH,
        include_anomalies=True,
        rng=rng,
    )

    assert len(result.samples) == 1
    assert result.samples[0].row is ledger_rows[17]
    assert result.anomaly_candidates == 2
    assert any("only 1 fit" in message for message in result.warnings)


def test_empty_rows_report_no_data(rng):
    result = allocate_sample(
        [],
        10,
        get_sampling_strategy(SamplingMethod.RANDOM),
        AmountType.BOTH,
        include_anomalies=True,
        rng=rng,
    )

    assert result.samples == []
    assert result.status == SampleStatus.NO_DATA
    assert result.warnings == ["No data to sample"]


@pytest.mark.parametrize("method", list(SamplingMethod))
def test_zero_amounts_report_no_eligible_amount(method, make_rows, rng):
    rows = make_rows([0.0] * 5, [100.0] * 5)

    result = allocate_sample(
        rows,
        3,
        get_sampling_strategy(method),
        AmountType.DEBIT,
        include_anomalies=False,
        rng=rng,
    )

    assert result.samples == []
    assert result.status == SampleStatus.NO_ELIGIBLE_AMOUNT
    assert result.eligible_count == 0


def test_request_larger_than_pool_is_clamped(make_rows, rng):
    rows = make_rows([10.0, 0.0, 30.0, 40.0, 50.0, 60.0])

    result = allocate_sample(
        rows,
        10,
        get_sampling_strategy(SamplingMethod.RANDOM),
        AmountType.DEBIT,
        include_anomalies=False,
        rng=rng,
    )

    assert len(result.samples) == 5
    assert result.clamped is True
    assert rows[1] not in result.rows
    assert result.status == SampleStatus.COMPLETE


def test_negative_size_is_treated_as_zero(make_rows, rng):
    rows = make_rows([10.0, 20.0, 30.0])

    result = allocate_sample(
        rows,
        -4,
        get_sampling_strategy(SamplingMethod.RANDOM),
        AmountType.DEBIT,
        include_anomalies=True,
        rng=rng,
    )

    assert result.samples == []
    assert result.requested_size == 0
    assert result.warnings


def test_mus_under_yield_is_partial(make_rows, rng):
    rows = make_rows([1.0, 1.0, 1.0, 1000.0])

    result = allocate_sample(
        rows,
        3,
        get_sampling_strategy(SamplingMethod.MUS),
        AmountType.DEBIT,
        include_anomalies=False,
        rng=rng,
    )

    assert rows[3] in result.rows
    assert len(result.samples) < 3
    assert result.under_yield is True
    assert result.status == SampleStatus.PARTIAL
    assert any("monetary unit sampling" in message for message in result.warnings)


def test_allocation_invariants_hold_for_random_inputs(make_rows):
    """Length, uniqueness and anomaly tagging over many random ledgers"""
    for seed in range(60):
        rng = np.random.default_rng(seed)
        n = int(rng.integers(0, 80))
        debits = rng.lognormal(mean=6.0, sigma=1.5, size=n)
        debits[rng.random(n) < 0.2] = 0.0
        credits = np.where(rng.random(n) < 0.3, rng.lognormal(5.0, 1.0, n), 0.0)

        rows = make_rows(debits.tolist(), credits.tolist())
        size = int(rng.integers(0, 40))
        amount_type = list(AmountType)[seed % 4]
        method = list(SamplingMethod)[(seed // 4) % 4]
        include_anomalies = bool(seed % 2)

        result = allocate_sample(
            rows,
            size,
            get_sampling_strategy(method),
            amount_type,
            include_anomalies,
            rng,
        )

        pool = eligible_rows(rows, amount_type)
        flagged = detect_high_severity(pool, amount_type) if pool else []
        flagged_ids = {id(row) for row in flagged}
        sample_ids = [id(s.row) for s in result.samples]

        assert len(result.samples) <= size
        assert len(set(sample_ids)) == len(sample_ids)
        assert all(id(s.row) in {id(row) for row in pool} for s in result.samples)
        for sample in result.samples:
            if sample.is_anomaly:
                assert id(sample.row) in flagged_ids
                assert sample.severity == Severity.HIGH
        if include_anomalies:
            assert result.anomaly_count == min(len(flagged), size)
        else:
            assert result.anomaly_count == 0
        if method != SamplingMethod.MUS and pool:
            assert len(result.samples) == min(size, len(pool))

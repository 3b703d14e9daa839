"""Frame adapters at the edges of the sampling engine.

Converts normalized ledger frames into rows and sampling results back into
frames with the same columns as the source plus the descriptive columns.
"""

from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Tuple

import pandas as pd

from ledger_sampling.model.ledger import LedgerRow

CLASSIFICATION_COLUMN = "classification"
METHOD_COLUMN = "sampling_method"
ANOMALY_LABEL = "anomaly"
NORMAL_LABEL = "normal"

# Canonical column names produced by the normalizer
DEFAULT_COLUMNS = {
    "date": "date",
    "debit": "debit",
    "credit": "credit",
    "account": "account",
    "vendor": "vendor",
    "description": "description",
    "entry_number": "entry_number",
}

METHOD_DISPLAY_NAMES = {
    "random": "Random",
    "systematic": "Systematic",
    "mus": "MUS",
    "smart": "Smart",
}


def _to_amount(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, str):
        try:
            return float(value.replace(",", ""))
        except ValueError:
            return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if pd.isna(amount) else amount


def _to_date(value: Any) -> Optional[date]:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _to_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def rows_from_frame(
    frame: pd.DataFrame, column_map: Optional[Mapping[str, str]] = None
) -> List[LedgerRow]:
    """Build ledger rows from a normalized DataFrame.

    Args:
        frame: DataFrame with parsed dates and summary rows removed
        column_map: Canonical field to frame column overrides (optional)

    Returns:
        One LedgerRow per frame row; every original column is kept in fields
    """
    columns = dict(DEFAULT_COLUMNS)
    if column_map:
        columns.update(column_map)

    rows = []
    for record in frame.to_dict(orient="records"):
        entry_number = record.get(columns["entry_number"])
        rows.append(
            LedgerRow(
                date=_to_date(record.get(columns["date"])),
                debit_amount=abs(_to_amount(record.get(columns["debit"]))),
                credit_amount=abs(_to_amount(record.get(columns["credit"]))),
                account_name=_to_text(record.get(columns["account"])),
                vendor_name=_to_text(record.get(columns["vendor"])),
                description=_to_text(record.get(columns["description"])),
                entry_number=_to_text(entry_number) or None,
                fields=dict(record),
            )
        )
    return rows


def build_sample_frame(results) -> pd.DataFrame:
    """Convert sampling results to a DataFrame for export.

    The classification column comes first and only when anomaly inclusion
    was requested; the sampling method column is always last.

    Args:
        results: SamplingResults from SamplingService.run

    Returns:
        DataFrame with the original columns plus the descriptive columns
    """
    include_anomalies = results.config.include_anomalies
    method_name = METHOD_DISPLAY_NAMES[results.config.sampling_method.value]

    records = []
    original_columns: List[str] = []
    for sample in results.samples:
        for column in sample.row.fields:
            if column not in original_columns:
                original_columns.append(column)

        record = dict(sample.row.fields)
        if include_anomalies:
            record[CLASSIFICATION_COLUMN] = (
                ANOMALY_LABEL if sample.is_anomaly else NORMAL_LABEL
            )
        record[METHOD_COLUMN] = method_name
        records.append(record)

    columns = original_columns + [METHOD_COLUMN]
    if include_anomalies:
        columns = [CLASSIFICATION_COLUMN] + columns

    return pd.DataFrame(records, columns=columns)


def build_anomaly_summary(
    results, account_name: Optional[str] = None
) -> List[Tuple[str, Any]]:
    """Summary lines describing how anomalies make up the sample."""
    samples = results.samples
    anomaly_count = sum(1 for sample in samples if sample.is_anomaly)
    method_name = METHOD_DISPLAY_NAMES[results.config.sampling_method.value]

    return [
        ("Account", account_name or ""),
        ("Sampling method", method_name),
        ("Total samples", len(samples)),
        ("Anomalies included", anomaly_count),
        ("Normal samples", len(samples) - anomaly_count),
        (
            ANOMALY_LABEL,
            "High severity anomaly (z-score above 3, population maximum, etc.)",
        ),
        (NORMAL_LABEL, "Selected by the sampling method"),
    ]


def export_sample_to_csv(frame: pd.DataFrame) -> str:
    """Export a sample frame to CSV text."""
    return frame.to_csv(index=False)

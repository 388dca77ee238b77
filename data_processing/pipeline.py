# krishi_trends/data_processing/pipeline.py
#
# Fluent Data Processing Pipeline
# A chainable class for applying a sequence of cleaning and preparation steps
# to raw detection exports before they reach the analytics package.

import pandas as pd
import logging
from typing import Dict, List
from collections import Counter

try:
    from .helpers import is_missing, normalize_label, normalize_severity
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in pipeline.py: could not import helpers. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)


def _clean_identifier(value):
    return None if is_missing(value) else str(value).strip()


def _as_nullable_object(series: pd.Series) -> pd.Series:
    """Object dtype with None, never NaN, for missing values (string dtypes map None to NaN)."""
    series = series.astype(object)
    return series.where(series.notna(), None)


class DataPipeline:
    """
    A fluent interface for applying a sequence of data processing operations.
    Every step works on the pipeline's private copy of the input frame.
    """
    def __init__(self, df: pd.DataFrame):
        if not isinstance(df, pd.DataFrame):
            raise TypeError("DataPipeline must be initialized with a pandas DataFrame.")
        self._df = df.copy()

    def get_df(self) -> pd.DataFrame:
        """Returns the processed DataFrame."""
        return self._df

    def clean_column_names(self) -> 'DataPipeline':
        """Standardizes DataFrame column names to lower snake case."""
        if self._df.columns.empty:
            return self
        new_cols = (
            self._df.columns.astype(str)
            .str.lower().str.strip()
            .str.replace(r'[^0-9a-z_]+', '_', regex=True)
            .str.replace(r'_{2,}', '_', regex=True).str.strip('_')
        )
        new_cols = [f"unnamed_col_{i}" if not name else name for i, name in enumerate(new_cols)]

        counts = Counter(new_cols)
        if max(counts.values(), default=0) > 1:
            seen = Counter()
            final_cols = []
            for col_name in new_cols:
                if counts[col_name] > 1:
                    suffix = seen[col_name]
                    seen[col_name] += 1
                    final_cols.append(f"{col_name}_{suffix}")
                else:
                    final_cols.append(col_name)
            self._df.columns = final_cols
        else:
            self._df.columns = new_cols
        return self

    def rename_columns(self, rename_map: Dict[str, str]) -> 'DataPipeline':
        """Renames columns present in the frame; absent keys are ignored."""
        if not rename_map:
            return self
        applicable = {
            src: dst for src, dst in rename_map.items()
            if src in self._df.columns and dst not in self._df.columns
        }
        self._df = self._df.rename(columns=applicable)
        return self

    def ensure_columns(self, columns: List[str]) -> 'DataPipeline':
        """Adds any missing optional columns, filled with nulls."""
        for col in columns:
            if col not in self._df.columns:
                self._df[col] = None
        return self

    def convert_date_columns(self, date_columns: List[str], errors: str = 'coerce') -> 'DataPipeline':
        """Converts specified columns to timezone-aware UTC datetimes."""
        if not date_columns:
            return self
        for col in date_columns:
            if col in self._df.columns:
                series = self._df[col]
                if pd.api.types.is_object_dtype(series.dtype) or pd.api.types.is_string_dtype(series.dtype):
                    # Backend exports mix "Z" and "+00:00" offsets and optional fractions.
                    self._df[col] = pd.to_datetime(series, errors=errors, utc=True, format='ISO8601')
                else:
                    self._df[col] = pd.to_datetime(series, errors=errors, utc=True)
            else:
                logger.warning(f"Date conversion skipped: Column '{col}' not found.")
        return self

    def normalize_detection_fields(self) -> 'DataPipeline':
        """Cleans the label, severity and identifier columns of a detection frame."""
        cleaners = {
            'disease_label': normalize_label,
            'severity': normalize_severity,
            'id': _clean_identifier,
            'farmer_id': _clean_identifier,
        }
        for col, cleaner in cleaners.items():
            if col in self._df.columns:
                self._df[col] = _as_nullable_object(self._df[col].astype(object).map(cleaner))
        return self

    def drop_invalid_rows(self, required: List[str]) -> 'DataPipeline':
        """Drops rows whose required columns are null, logging how many were lost."""
        present = [col for col in required if col in self._df.columns]
        if not present:
            return self
        before = len(self._df)
        self._df = self._df.dropna(subset=present)
        dropped = before - len(self._df)
        if dropped:
            logger.warning(f"Dropped {dropped} row(s) missing one of {present}.")
        return self

    def sort_by(self, column: str) -> 'DataPipeline':
        """Stable sort on a column, so equal keys keep their input order."""
        if column in self._df.columns:
            self._df = self._df.sort_values(column, kind='mergesort').reset_index(drop=True)
        return self

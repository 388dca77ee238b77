# krishi_trends/data_processing/loaders.py
#
# Unified Data Loading Engine
# Turns CSV exports and backend rows into a normalized detection frame with a
# fixed column contract: id, disease_label, severity, observed_at, farmer_id.

import logging
import pandas as pd
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

try:
    from config.settings import settings
    from .pipeline import DataPipeline
    from .helpers import is_missing, to_utc_timestamp
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in loaders.py: A core dependency is missing. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)

DETECTION_COLUMNS = ['id', 'disease_label', 'severity', 'observed_at', 'farmer_id']

# Column names used by the hosted backend's `disease_detections` table.
BACKEND_COLUMN_MAP = {
    'detected_disease': 'disease_label',
    'analyzed_at': 'observed_at',
}


class DataLoader:
    """
    A configuration-driven engine for loading and preparing data sources.
    It is resilient by design at the I/O boundary: a missing or malformed
    file yields an empty DataFrame and a log entry, never an exception.
    """
    def __init__(self, data_source_dir: Path):
        self.base_dir = data_source_dir
        if not self.base_dir.exists():
            logger.debug(f"Data source directory not found: {self.base_dir}. Relative paths will not resolve.")

    def _get_path(self, file_path: Path) -> Path:
        """Resolves a file path relative to the base data directory."""
        file_path = Path(file_path)
        return self.base_dir / file_path if not file_path.is_absolute() else file_path

    def load_csv(
        self, file_path: Path, date_cols: Optional[list] = None, dtype: Optional[Any] = None
    ) -> pd.DataFrame:
        """Loads a CSV file and applies the standard column-name and date cleaning."""
        full_path = self._get_path(file_path)
        log_ctx = f"CSV({full_path.name})"
        logger.debug(f"[{log_ctx}] Attempting to load data from {full_path}")

        if not full_path.exists():
            logger.warning(f"[{log_ctx}] Source file not found. Returning empty DataFrame.")
            return pd.DataFrame()

        try:
            df = pd.read_csv(full_path, low_memory=False, dtype=dtype)
            if df.empty:
                logger.warning(f"[{log_ctx}] File is empty.")
                return pd.DataFrame()

            pipeline = DataPipeline(df).clean_column_names()
            if date_cols:
                pipeline.convert_date_columns(date_cols)

            df_processed = pipeline.get_df()
            logger.info(f"[{log_ctx}] Successfully loaded and cleaned {len(df_processed)} records.")
            return df_processed

        except Exception as e:
            logger.critical(f"[{log_ctx}] CRITICAL ERROR loading or processing file: {e}", exc_info=True)
            return pd.DataFrame()


def empty_detection_frame() -> pd.DataFrame:
    """A zero-row frame that still honors the detection column contract."""
    df = pd.DataFrame({col: pd.Series(dtype=object) for col in DETECTION_COLUMNS})
    df['observed_at'] = pd.to_datetime(df['observed_at'], utc=True)
    return df


def prepare_detection_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalizes a raw detection table into the detection column contract.

    Accepts either backend column names (`detected_disease`, `analyzed_at`) or
    the canonical ones. Rows without a parseable timestamp are dropped; the id
    is carried through but never required, since no calculation uses it.
    Raises ValueError when the table has rows but no timestamp column at all.
    """
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"Expected a pandas DataFrame, got {type(df).__name__}.")
    if df.empty:
        return empty_detection_frame()

    pipeline = DataPipeline(df).clean_column_names().rename_columns(BACKEND_COLUMN_MAP)
    if 'observed_at' not in pipeline.get_df().columns:
        raise ValueError("Detection records must carry an 'observed_at' (or 'analyzed_at') timestamp.")

    prepared = (
        pipeline.ensure_columns(DETECTION_COLUMNS)
        .convert_date_columns(['observed_at'])
        .normalize_detection_fields()
        .drop_invalid_rows(['observed_at'])
        .sort_by('observed_at')
        .get_df()
    )
    return prepared[DETECTION_COLUMNS].reset_index(drop=True)


def detections_from_rows(rows: Iterable[Any]) -> pd.DataFrame:
    """
    Builds a detection frame from row mappings as returned by the backend API,
    or from pydantic models exposing `model_dump()`.
    """
    rows = [row.model_dump() if hasattr(row, 'model_dump') else dict(row) for row in rows]
    if not rows:
        return empty_detection_frame()
    return prepare_detection_frame(pd.DataFrame.from_records(rows))


def filter_lookback_window(
    df: pd.DataFrame, lookback_days: int, as_of: Any = None
) -> pd.DataFrame:
    """Keeps detections observed in `[as_of - lookback_days, as_of)`."""
    if lookback_days <= 0:
        raise ValueError(f"lookback_days must be positive, got {lookback_days}.")
    if df.empty:
        return df.copy()
    end = to_utc_timestamp(as_of)
    start = end - pd.Timedelta(days=lookback_days)
    mask = (df['observed_at'] >= start) & (df['observed_at'] < end)
    logger.debug(f"Lookback window {start.date()}..{end.date()} keeps {int(mask.sum())}/{len(df)} records.")
    return df.loc[mask].reset_index(drop=True)


# --- Singleton Instance for the configured data directory ---
_data_loader = DataLoader(settings.directories.data_sources)


# --- Public API Functions for Data Loading ---

def load_detection_records(path: Optional[Path] = None) -> pd.DataFrame:
    """Loads and normalizes the disease detections export."""
    df = _data_loader.load_csv(path or settings.detections_path, dtype=str)
    try:
        return prepare_detection_frame(df)
    except ValueError as e:
        logger.error(f"Detections export is unusable: {e}")
        return empty_detection_frame()


def load_farmer_districts(path: Optional[Path] = None) -> Dict[str, str]:
    """Reads farmer profiles into a farmer id -> district mapping."""
    df = _data_loader.load_csv(path or settings.farmer_profiles_path, dtype=str)
    if df.empty:
        return {}
    id_col = 'farmer_id' if 'farmer_id' in df.columns else 'id'
    if id_col not in df.columns or 'district' not in df.columns:
        logger.error(f"Farmer profiles need '{id_col}' and 'district' columns; found {list(df.columns)}.")
        return {}
    return {
        str(farmer_id).strip(): str(district).strip()
        for farmer_id, district in zip(df[id_col], df['district'])
        if not is_missing(farmer_id) and not is_missing(district)
    }


def coerce_detection_frame(records: Any) -> pd.DataFrame:
    """
    Accepts a DataFrame, or an iterable of mappings / pydantic detection
    models, and returns a normalized detection frame. The caller's object is
    never modified.
    """
    if isinstance(records, pd.DataFrame):
        return prepare_detection_frame(records)
    if records is None or isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise TypeError(f"Detection records must be a DataFrame or a sequence of records, got {type(records).__name__}.")
    return detections_from_rows(records)

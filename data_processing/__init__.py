# krishi_trends/data_processing/__init__.py
#
# Data Processing Package API
# Loading, cleaning and normalizing disease detection data into the frame
# contract consumed by the analytics package.

"""
Initializes the data_processing package, making key functions and classes
available at the top level for easier, cleaner imports in other modules.
"""

# --- Primary Data Loading Functions ---
from .loaders import (
    DETECTION_COLUMNS,
    DataLoader,
    coerce_detection_frame,
    detections_from_rows,
    empty_detection_frame,
    filter_lookback_window,
    load_detection_records,
    load_farmer_districts,
    prepare_detection_frame,
)

# --- Data Preparation & Cleaning ---
from .pipeline import DataPipeline

# --- Shared Normalizers ---
from .helpers import (
    UNKNOWN_LABEL,
    normalize_label,
    normalize_severity,
    round_half_up,
    to_utc_timestamp,
)


__all__ = [
    # --- Loading ---
    "DETECTION_COLUMNS",
    "DataLoader",
    "coerce_detection_frame",
    "detections_from_rows",
    "empty_detection_frame",
    "filter_lookback_window",
    "load_detection_records",
    "load_farmer_districts",
    "prepare_detection_frame",

    # --- Preparation ---
    "DataPipeline",

    # --- Normalizers ---
    "UNKNOWN_LABEL",
    "normalize_label",
    "normalize_severity",
    "round_half_up",
    "to_utc_timestamp",
]

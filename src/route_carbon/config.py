import os
import pandas as pd
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Project root is three levels up from src/route_carbon/config.py
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.environ.get(
    "ROUTE_CARBON_PARAMETERS",
    os.path.join(PROJECT_ROOT, "data", "parameters_config", "carbon_parameters.xlsx"),
)


def load_excel_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load parameter overrides from an Excel (or CSV) sheet.
    Expected columns: Key, Value (Unit, Section, Description are informational).
    Returns a dictionary of Key -> Value. A missing file yields an empty dict.
    """
    config = {}
    if not os.path.exists(path):
        logger.debug(f"Parameter file not found at {path}. Using built-in defaults.")
        return config

    try:
        if path.lower().endswith(".csv"):
            df = pd.read_csv(path)
        else:
            df = pd.read_excel(path)
    except Exception as e:
        logger.error(f"Failed to load parameters from {path}: {e}")
        return config

    if "Key" not in df.columns or "Value" not in df.columns:
        logger.warning(f"Parameter file {path} missing 'Key' or 'Value' columns.")
        return config

    for _, row in df.iterrows():
        if pd.isna(row["Key"]) or pd.isna(row["Value"]):
            continue
        key = str(row["Key"]).strip()
        config[key] = row["Value"]
    logger.info(f"Loaded {len(config)} parameters from {path}")

    return config

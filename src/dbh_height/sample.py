"""
Synthetic diameter-height sample
"""
import logging
from typing import Optional, Tuple
import numpy as np
import pandas as pd
from .config import SampleConfig

logger = logging.getLogger(__name__)

DBH_COLUMN = 'DBH'
HEIGHT_COLUMN = 'Height'


def generate_sample(config: Optional[SampleConfig] = None) -> pd.DataFrame:
    """
    Generate a reproducible (DBH, Height) sample

    DBH is drawn uniformly from [dbh_min, dbh_max) and height is
    height_min + DBH / max(DBH) * (height_max - height_min).

    Args:
        config: sample definition, defaults to SampleConfig()

    Returns:
        DataFrame with columns DBH and Height
    """
    if config is None:
        config = SampleConfig()

    rng = np.random.default_rng(config.seed)
    dbh = rng.uniform(config.dbh_min, config.dbh_max, config.n_samples)
    height = config.height_min + (dbh / dbh.max()) * (config.height_max - config.height_min)

    data = pd.DataFrame({DBH_COLUMN: dbh, HEIGHT_COLUMN: height})
    logger.info(f"Generated sample: {len(data)} trees (seed={config.seed})")
    logger.info(f"  DBH range: [{dbh.min():.2f}, {dbh.max():.2f}]")
    logger.info(f"  Height range: [{height.min():.2f}, {height.max():.2f}]")
    return data


def unpack_sample(data: pd.DataFrame) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split a sample into DBH and height arrays, validating the observations

    Raises:
        ValueError: if a column is missing or a value is not positive
    """
    for column in (DBH_COLUMN, HEIGHT_COLUMN):
        if column not in data.columns:
            raise ValueError(f"Sample is missing column '{column}'")

    dbh = data[DBH_COLUMN].to_numpy(dtype=float)
    height = data[HEIGHT_COLUMN].to_numpy(dtype=float)

    if not (np.all(np.isfinite(dbh)) and np.all(np.isfinite(height))):
        raise ValueError("Sample contains non-finite values")
    if np.any(dbh <= 0) or np.any(height <= 0):
        raise ValueError("DBH and height must be positive")
    return dbh, height

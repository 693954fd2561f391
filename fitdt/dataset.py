import logging
import numpy as np
import pandas as pd
from fitdt.custom_models.dt.model_v1 import InvalidInputError, MIN_FEATURES

logger = logging.getLogger(__name__)

__all__ = ['get_dataset', 'load_dataframe']


def load_dataframe(dataset_file):
    # thresholds are compared bit for bit, so parse floats exactly
    data = pd.read_csv(dataset_file, low_memory=False, float_precision='round_trip')
    logger.debug(f"Loaded {len(data)} rows with columns {list(data.columns)} from {dataset_file}")
    return data


def get_dataset(dataset_file, feature_columns=None, label_column='label', min_features=MIN_FEATURES):
    """Load feature vectors (and labels, when present) from a CSV file.

    Feature columns default to every column except the label, in file order.
    Returns the features as a float matrix and the labels as an int array, or
    ``None`` in place of the labels when the file has no label column.
    """
    data = load_dataframe(dataset_file)

    if feature_columns is None:
        feature_columns = [col for col in data.columns if col != label_column]
    missing = [col for col in feature_columns if col not in data.columns]
    if missing:
        raise InvalidInputError(f"Columns {missing} not found in {dataset_file}")
    if len(feature_columns) < min_features:
        raise InvalidInputError(f"Expected at least {min_features} feature columns in {dataset_file}, "
                                f"got {len(feature_columns)}: {feature_columns}")

    try:
        x = data[feature_columns].to_numpy(dtype=np.float64)
    except ValueError as e:
        raise InvalidInputError(f"Non-numeric feature values in {dataset_file}: {e}")

    y = None
    if label_column in data.columns:
        y = data[label_column].to_numpy().astype(int)
    else:
        logger.debug(f"No '{label_column}' column in {dataset_file}, predictions will not be scored")
    return x, y

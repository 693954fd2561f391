import logging
import numpy as np
import pandas as pd
from fitdt.args import AccuracyMetric, ModelType
from fitdt.classifier import get_classifier
from fitdt.dataset import get_dataset, load_dataframe
from fitdt.utils import float32_grid
from fitdt.custom_models.dt.model_v1 import (
    predict, build_model_v1_tree,
    MODE_THRESHOLD, LOW_X0_THRESHOLD, HIGH_X0_THRESHOLD,
    REST_X2_THRESHOLD, ACTIVE_X2_THRESHOLD,
)
from fitdt.custom_models.dt.tree import FrozenDecisionTree
from fitdt.hw_templates.utils import create_inputs_file_from_array


logger = logging.getLogger(__name__)

# value ranges for the sampled parity grid: (low, high, thresholds)
PARITY_GRID_BOUNDS = {
    0: (0.0, 80.0, [LOW_X0_THRESHOLD, HIGH_X0_THRESHOLD]),
    2: (0.0, 50.0, [REST_X2_THRESHOLD, ACTIVE_X2_THRESHOLD]),
    3: (0.0, 1.0, [MODE_THRESHOLD]),
}


def perform_prediction(args):
    """Classify the single feature vector given on the command line."""
    classifier = get_classifier(args.model_type)
    label = classifier.predict_one(args.features)
    logger.info(f"Features {args.features} -> class {label}")
    return label


def perform_basic_evaluation(args):
    """Classify every row of a dataset file and score the predictions when labels are available.
    """
    accuracy_metric = args.accuracy_metric or AccuracyMetric.Accuracy
    classifier = get_classifier(args.model_type, accuracy_metric=accuracy_metric)
    x, y = get_dataset(args.dataset_file, label_column=args.label_column)
    logger.info(f"Classifying {x.shape[0]} feature vectors from {args.dataset_file} "
                f"with {args.model_type.name.lower()}")

    y_pred = classifier.predict(x)
    counts = {int(label): int(count) for label, count in zip(*np.unique(y_pred, return_counts=True))}
    logger.info(f"Predicted class counts: {counts}")

    score = None
    if y is not None:
        score = classifier.accuracy_f(y, y_pred, **classifier.accuracy_params)
        logger.info(f"{accuracy_metric.name}: {score:.4f}")
        report, confusion = classifier.report(x, y)
        logger.debug(f"Classification report:\n{report}")
        logger.debug(f"Confusion matrix (rows: true, columns: predicted):\n{confusion}")

    if args.predictions_file is not None:
        data = load_dataframe(args.dataset_file)
        data['prediction'] = y_pred
        data.to_csv(args.predictions_file, index=False)
        logger.info(f"Predictions written to {args.predictions_file}")

    return y_pred, score


def perform_export(args):
    """Write the C header of the selected tree, and optionally the device test vectors."""
    classifier = get_classifier(args.model_type)
    metadata = classifier.to_c(args.export_header, precision=args.header_precision)

    if args.inputs_file is not None:
        x, _ = get_dataset(args.dataset_file, label_column=args.label_column)
        create_inputs_file_from_array(array=x.astype(np.float32),
                                      inputs_file=args.inputs_file,
                                      modifier=lambda value: np.format_float_positional(value, unique=True, trim='0'))
        logger.info(f"Device test vectors written to {args.inputs_file}")
    return metadata


def sample_parity_grid(num_points):
    """Cartesian grid of single-precision feature vectors around every threshold."""
    grid = float32_grid(PARITY_GRID_BOUNDS, num_points)
    mesh = np.meshgrid(grid[0], np.zeros(1, dtype=np.float32), grid[2], grid[3], indexing='ij')
    return np.stack([axis.ravel() for axis in mesh], axis=1)


def check_copies_parity(num_points=41):
    """Compare both stored copies of model v1 with the canonical tree.

    Each copy is compared with the canonical tree under the same comparison
    semantics. On the device (AVR, ``float`` inputs and 32-bit comparisons) both
    copies must agree with the canonical tree evaluated in single precision. On
    the host, the export copy must agree with :func:`predict` in double precision.
    The sketch copy is not checked on the host: its ``24.85`` literal, compared
    as a double, sends float32(24.85) itself to the right branch.
    """
    x = sample_parity_grid(num_points)
    canonical_device = FrozenDecisionTree(build_model_v1_tree(), dtype=np.float32).predict(x)
    canonical_host = np.array([predict(row) for row in x.astype(np.float64).tolist()], dtype=int)

    copies = {
        'export@float32': (FrozenDecisionTree(build_model_v1_tree(), dtype=np.float32), canonical_device),
        'sketch@float32': (FrozenDecisionTree(build_model_v1_tree(short_literals=True), dtype=np.float32),
                           canonical_device),
        'export@double': (FrozenDecisionTree(build_model_v1_tree()), canonical_host),
    }
    mismatches = {}
    for name, (tree, expected) in copies.items():
        y_copy = tree.predict(x.astype(np.float64))
        mismatches[name] = int(np.count_nonzero(y_copy != expected))
        logger.debug(f"{name} copy: {mismatches[name]} mismatches over {len(x)} vectors")

    summary = pd.Series(canonical_host).value_counts().sort_index()
    logger.debug(f"Grid class coverage:\n{summary.to_string()}")
    return len(x), mismatches


def host_device_divergence(num_points=41):
    """Grid vectors whose label differs between double and single-precision evaluation.

    The export threshold 24.949999809265137 is a float32 midpoint and rounds up
    to float32(24.95), so a feature 2 equal to float32(24.95) is class 2 on the
    device and class 1 on the host. No other threshold differs.
    """
    x = sample_parity_grid(num_points)
    host = np.array([predict(row) for row in x.astype(np.float64).tolist()], dtype=int)
    device = FrozenDecisionTree(build_model_v1_tree(), dtype=np.float32).predict(x)
    return x[host != device]


def perform_parity_check(args):
    num_vectors, mismatches = check_copies_parity(args.grid_points)
    if any(mismatches.values()):
        raise RuntimeError(f"Stored copies of {ModelType.Model_V1.name.lower()} disagree with the canonical tree: "
                           f"{mismatches} mismatches over {num_vectors} vectors")
    logger.info(f"Both stored copies match the canonical tree on {num_vectors} vectors")

    diverging = host_device_divergence(args.grid_points)
    if len(diverging):
        logger.info(f"{len(diverging)} vectors classify differently in double and single precision, "
                    f"all with feature 2 in {sorted(set(diverging[:, 2].tolist()))}")
    return num_vectors, mismatches

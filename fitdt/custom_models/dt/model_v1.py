"""Frozen fitness-planner decision tree (model v1).

The tree was exported once from a trained classifier and is compiled into the
device firmware. Inputs are 4-element feature vectors; index 1 is not used by
any split. All comparisons are inclusive, so a value equal to a threshold goes
to the left branch.
"""
from fitdt.custom_models.dt.node import TreeNode


__all__ = [
    'InvalidInputError', 'MIN_FEATURES', 'predict', 'DecisionTree',
    'build_model_v1_tree', 'check_features',
]

MIN_FEATURES = 4

# full-precision thresholds of the exported header
MODE_THRESHOLD = 0.5
LOW_X0_THRESHOLD = 29.5
HIGH_X0_THRESHOLD = 49.5
REST_X2_THRESHOLD = 24.949999809265137
ACTIVE_X2_THRESHOLD = 24.850000381469727

# literals of the copy embedded in the sketch
REST_X2_SHORT_THRESHOLD = 24.95
ACTIVE_X2_SHORT_THRESHOLD = 24.85


class InvalidInputError(ValueError):
    """The feature vector cannot be classified (too short or not a sequence)."""


def check_features(features, min_features=MIN_FEATURES):
    try:
        num_features = len(features)
    except TypeError:
        raise InvalidInputError(f"Features must be a sequence, got {type(features).__name__}")
    if num_features < min_features:
        raise InvalidInputError(f"Expected at least {min_features} features, got {num_features}")


def predict(features):
    """Predict the class label (0-5) of a single feature vector."""
    check_features(features)
    # widen to double, numpy float32 scalars would otherwise round the thresholds
    x0, x2, x3 = float(features[0]), float(features[2]), float(features[3])

    if x3 <= MODE_THRESHOLD:
        if x0 <= LOW_X0_THRESHOLD:
            if x2 <= REST_X2_THRESHOLD:
                return 2
            else:
                return 1
        else:
            if x0 <= HIGH_X0_THRESHOLD:
                return 1
            else:
                return 0
    else:
        if x0 <= LOW_X0_THRESHOLD:
            if x2 <= ACTIVE_X2_THRESHOLD:
                return 5
            else:
                return 4
        else:
            if x0 <= HIGH_X0_THRESHOLD:
                return 4
            else:
                return 3


class DecisionTree:
    """Stateless handle around :func:`predict`, for callers that expect a model object."""
    __slots__ = ()

    def predict(self, features):
        return predict(features)

    def __repr__(self):
        return f"{self.__class__.__name__}()"


def _leaf(label):
    return TreeNode(is_leaf=True, prediction=label)


def _split(feature_index, threshold, left, right):
    return TreeNode(is_leaf=False, feature_index=feature_index, threshold=threshold, left=left, right=right)


def build_model_v1_tree(short_literals=False):
    """Build model v1 as a node graph.

    With ``short_literals`` the feature-2 thresholds are the rounded literals of
    the sketch copy instead of the full-precision export.
    """
    if short_literals:
        rest_x2, active_x2 = REST_X2_SHORT_THRESHOLD, ACTIVE_X2_SHORT_THRESHOLD
    else:
        rest_x2, active_x2 = REST_X2_THRESHOLD, ACTIVE_X2_THRESHOLD

    rest_branch = _split(
        0, LOW_X0_THRESHOLD,
        _split(2, rest_x2, _leaf(2), _leaf(1)),
        _split(0, HIGH_X0_THRESHOLD, _leaf(1), _leaf(0)),
    )
    active_branch = _split(
        0, LOW_X0_THRESHOLD,
        _split(2, active_x2, _leaf(5), _leaf(4)),
        _split(0, HIGH_X0_THRESHOLD, _leaf(4), _leaf(3)),
    )
    return _split(3, MODE_THRESHOLD, rest_branch, active_branch)

import numpy as np
from fitdt.custom_models.dt.model_v1 import InvalidInputError, check_features


class FrozenDecisionTree:
    """Evaluate a fixed node graph. There is no fitting: the tree is given."""

    def __init__(self, root, dtype=None):
        self.root = root
        self.dtype = dtype
        self.n_features_required = max(
            (node.feature_index for node, _ in root.iter_nodes() if not node.is_leaf),
            default=-1
        ) + 1

    @property
    def node_count(self):
        return sum(1 for _ in self.root.iter_nodes())

    @property
    def max_depth(self):
        return max(depth for _, depth in self.root.iter_nodes())

    def thresholds(self):
        return [(node.feature_index, node.threshold) for node, _ in self.root.iter_nodes() if not node.is_leaf]

    def classes(self):
        return sorted({node.prediction for node, _ in self.root.iter_nodes() if node.is_leaf})

    def _goes_left(self, value, threshold):
        if self.dtype is not None:
            # compare in the precision of the target, e.g. 32-bit float on AVR
            return self.dtype(value) <= self.dtype(threshold)
        return float(value) <= float(threshold)

    def predict_one(self, x, node=None):
        if node is None:
            check_features(x, self.n_features_required)
            node = self.root
        while not node.is_leaf:
            if self._goes_left(x[node.feature_index], node.threshold):
                node = node.left
            else:
                node = node.right
        return node.prediction

    def predict(self, X):
        X = np.asarray(X)
        if X.ndim != 2:
            raise InvalidInputError(f"Expected a 2-D array of feature vectors, got {X.ndim} dimension(s)")
        if X.shape[1] < self.n_features_required:
            raise InvalidInputError(f"Expected at least {self.n_features_required} features, got {X.shape[1]}")
        return np.array([self.predict_one(x, self.root) for x in X], dtype=int)

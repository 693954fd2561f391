import numpy as np
import pytest
from fitdt import InvalidInputError
from fitdt.custom_models.dt.node import TreeNode
from fitdt.custom_models.dt.tree import FrozenDecisionTree
from fitdt.custom_models.dt.model_v1 import build_model_v1_tree


@pytest.fixture
def tree():
    return FrozenDecisionTree(build_model_v1_tree())


def test_structure(tree):
    assert tree.n_features_required == 4
    assert tree.node_count == 15
    assert tree.max_depth == 3
    assert tree.classes() == [0, 1, 2, 3, 4, 5]


def test_thresholds_are_listed_in_pre_order(tree):
    assert tree.thresholds() == [
        (3, 0.5),
        (0, 29.5), (2, 24.949999809265137), (0, 49.5),
        (0, 29.5), (2, 24.850000381469727), (0, 49.5),
    ]


def test_short_literals_only_change_feature_two():
    short = FrozenDecisionTree(build_model_v1_tree(short_literals=True))
    thresholds = dict(enumerate(short.thresholds()))
    assert thresholds[2] == (2, 24.95)
    assert thresholds[5] == (2, 24.85)
    full = FrozenDecisionTree(build_model_v1_tree()).thresholds()
    assert [t for i, t in thresholds.items() if i not in (2, 5)] == [t for i, t in enumerate(full) if i not in (2, 5)]


def test_predict_one_ties_go_left(tree):
    assert tree.predict_one([29.5, 0, 24.949999809265137, 0.5]) == 2
    assert tree.predict_one([29.5, 0, 24.95, 0.5]) == 1


def test_single_precision_comparison():
    # 24.949999809265137 is a float32 midpoint, it rounds up to float32(24.95)
    x = [0.0, 0.0, 24.95, 0.0]
    assert FrozenDecisionTree(build_model_v1_tree()).predict_one(x) == 1
    assert FrozenDecisionTree(build_model_v1_tree(), dtype=np.float32).predict_one(x) == 2


def test_double_mode_widens_float32_inputs(tree):
    x = np.array([29.5, 0, 24.95, 0.5], dtype=np.float32)
    assert tree.predict_one(x) == 1
    assert tree.predict(x.reshape(1, -1)).tolist() == [1]


def test_sketch_literal_as_double_misses_float32_tie():
    # float32(24.85) is exactly the full-precision active threshold
    x = [0.0, 0.0, float(np.float32(24.85)), 1.0]
    assert FrozenDecisionTree(build_model_v1_tree()).predict_one(x) == 5
    assert FrozenDecisionTree(build_model_v1_tree(short_literals=True)).predict_one(x) == 4
    assert FrozenDecisionTree(build_model_v1_tree(short_literals=True), dtype=np.float32).predict_one(x) == 5


def test_batch_predict(tree):
    x = np.array([[0, 0, 0, 0], [50, 0, 0, 0], [0, 0, 0, 1], [50, 0, 0, 1]], dtype=float)
    y = tree.predict(x)
    assert y.dtype.kind == 'i'
    assert y.tolist() == [2, 0, 5, 3]


def test_batch_predict_rejects_bad_shapes(tree):
    with pytest.raises(InvalidInputError):
        tree.predict([0.0, 0.0, 0.0, 0.0])
    with pytest.raises(InvalidInputError):
        tree.predict(np.zeros((3, 3)))


def test_predict_one_rejects_short_vectors(tree):
    with pytest.raises(InvalidInputError):
        tree.predict_one([1.0, 2.0, 3.0])


def test_single_leaf_tree():
    leaf_only = FrozenDecisionTree(TreeNode(is_leaf=True, prediction=3))
    assert leaf_only.n_features_required == 0
    assert leaf_only.max_depth == 0
    assert leaf_only.predict_one([]) == 3

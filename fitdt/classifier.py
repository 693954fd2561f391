import logging
import numpy as np
from sklearn import metrics
from fitdt.args import ModelType, AccuracyMetric, HeaderPrecision
from fitdt.utils import as_feature_matrix
from fitdt.custom_models.dt.model_v1 import DecisionTree, build_model_v1_tree
from fitdt.custom_models.dt.tree import FrozenDecisionTree
from fitdt.hw_templates.dt2c import write_tree_to_c


logger = logging.getLogger(__name__)


def get_classifier(model_type, accuracy_metric=AccuracyMetric.Accuracy):
    classifiers = {
        ModelType.Model_V1: ModelV1Wrapper,
        ModelType.Model_V1_Short: ModelV1ShortWrapper,
    }
    try:
        return classifiers[model_type](accuracy_metric)
    except KeyError:
        raise ValueError(f"Unknown model type: {model_type}")


class _ClassifierWrapper:
    # Base class for the frozen tree wrappers
    def __init__(self, accuracy_metric=AccuracyMetric.Accuracy):
        self._clf = None
        self._tree = None
        self.set_clf()
        self.set_accuracy_function(accuracy_metric)

    def set_clf(self):
        raise NotImplementedError

    def set_accuracy_function(self, accuracy_metric):
        self.accuracy_metric = accuracy_metric
        self.accuracy_params = {}
        if accuracy_metric == AccuracyMetric.Accuracy:
            self.accuracy_f = metrics.accuracy_score
        elif accuracy_metric == AccuracyMetric.F1:
            self.accuracy_f = metrics.f1_score
            self.accuracy_params['average'] = 'weighted'
        else:
            raise ValueError(f"Unknown accuracy metric: {accuracy_metric}")

    @property
    def classes_(self):
        return np.array(self._tree.classes())

    @property
    def n_features_in_(self):
        return self._tree.n_features_required

    def predict_one(self, x):
        return self._tree.predict_one(x)

    def predict(self, x):
        x = as_feature_matrix(x, self.n_features_in_)
        return self._tree.predict(x)

    def test(self, x_test, y_test):
        y_pred = self.predict(x_test)
        accuracy = self.accuracy_f(y_test, y_pred, **self.accuracy_params)
        return accuracy

    def report(self, x_test, y_test):
        """Per-class precision/recall and the confusion matrix over all tree classes."""
        y_pred = self.predict(x_test)
        labels = self.classes_
        text = metrics.classification_report(y_test, y_pred, labels=labels, zero_division=0)
        confusion = metrics.confusion_matrix(y_test, y_pred, labels=labels)
        return text, confusion

    def get_architecture(self):
        return self._tree.node_count, self._tree.max_depth

    def get_weights(self):
        return self._tree.thresholds()

    def to_c(self, header_file, precision=HeaderPrecision.Full, **kwargs):
        """Create a C header for the decision tree."""
        return write_tree_to_c(self._tree, header_file, precision=precision, **kwargs)


class ModelV1Wrapper(_ClassifierWrapper):
    """Canonical model v1: the unrolled function, backed by its node graph for export and inspection."""
    def set_clf(self):
        self._clf = DecisionTree()
        self._tree = FrozenDecisionTree(build_model_v1_tree())

    def predict_one(self, x):
        return self._clf.predict(x)

    def predict(self, x):
        x = as_feature_matrix(x, self.n_features_in_)
        return np.array([self._clf.predict(row) for row in x], dtype=int)


class ModelV1ShortWrapper(_ClassifierWrapper):
    """The sketch copy of model v1, evaluated in single precision like the AVR target does."""
    def set_clf(self):
        self._tree = FrozenDecisionTree(build_model_v1_tree(short_literals=True), dtype=np.float32)
        self._clf = self._tree

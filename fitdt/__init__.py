import os

__version__ = '1.0.0'

package_dir = os.path.dirname(os.path.abspath(__file__))

from fitdt.custom_models.dt.model_v1 import predict, DecisionTree, InvalidInputError  # noqa: E402

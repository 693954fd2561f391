import argparse
from enum import Enum


__all__ = [
    'cmd_args', 'validate_args',
    'ModelType', 'model_type_arg', 'AccuracyMetric', 'accuracy_metric_arg',
    'HeaderPrecision', 'header_precision_arg',
]


def cmd_args(parser):
    """Arguments for running the main application"""
    parser.add_argument('--name', '-n', help='Run name')
    parser.add_argument('--verbose', '-v', action='store_true', help='Emit debug log messages')
    parser.add_argument('--deterministic', action='store_true', help='Run the application in a deterministic way')
    parser.add_argument('--global-seed', '--seed', type=int, default=123, dest='global_seed',
                        help='Global seed for the application. Used if deterministic is set to True')
    parser.add_argument('--yaml-cfg-file', help='YAML file overriding the command line arguments')
    parser.add_argument('--log-dir', default='logs', help='Directory where the run logs are stored. Default is ./logs')

    app_args = parser.add_argument_group("Classifier arguments")
    app_args.add_argument("--model", type=model_type_arg, dest='model_type', default='model_v1',
                          help=f"Tree variant to use. Options: {' | '.join(str_to_model_type_map.keys())}")
    app_args.add_argument("--accuracy-metric", type=accuracy_metric_arg, default='accuracy',
                          help="Metric used when the dataset has labels: accuracy | f1. Default is accuracy.")

    # Input-specific arguments
    inp_args = app_args.add_mutually_exclusive_group()
    inp_args.add_argument("--features", type=float, nargs='+', default=None,
                          help="Classify a single feature vector (at least 4 values).")
    inp_args.add_argument("--dataset-file", type=str, default=None,
                          help="CSV file with one feature vector per row and an optional 'label' column.")
    app_args.add_argument("--label-column", type=str, default='label',
                          help="Name of the label column in the dataset file. Default is 'label'.")
    app_args.add_argument("--predictions-file", type=str, default=None,
                          help="Write the dataset rows with a 'prediction' column to this CSV file.")

    # Export-specific arguments
    exp_args = parser.add_argument_group("Export arguments")
    exp_args.add_argument("--export-header", type=str, default=None,
                          help="Write the tree as a C header to this file.")
    exp_args.add_argument("--header-precision", type=header_precision_arg, default='full',
                          help="Threshold literals in the header: full | short. Default is full.")
    exp_args.add_argument("--inputs-file", type=str, default=None,
                          help="Write the dataset rows as device test vectors to this file.")

    # Parity-specific arguments
    par_args = parser.add_argument_group("Parity check arguments")
    par_args.add_argument("--check-parity", action='store_true',
                          help="Compare both stored copies of the tree against the canonical function.")
    par_args.add_argument("--grid-points", type=int, default=41,
                          help="Grid points per used feature for the parity check. Default is 41.")
    return parser


def validate_args(args):
    if not args.deterministic:
        args.global_seed = None

    if args.predictions_file is not None and args.dataset_file is None:
        raise ValueError("--predictions-file requires --dataset-file")
    if args.inputs_file is not None and (args.export_header is None or args.dataset_file is None):
        raise ValueError("--inputs-file requires both --export-header and --dataset-file")
    if args.grid_points < 2:
        raise ValueError(f"--grid-points must be at least 2 (received {args.grid_points})")


### Enumeration and argument type functions

class ModelType(Enum):
    Model_V1 = 0
    Model_V1_Short = 1

str_to_model_type_map = {
    entry.name.lower(): entry for entry in ModelType
}

def model_type_arg(model_str):
    try:
        return str_to_model_type_map[model_str.lower()]
    except KeyError:
        raise argparse.ArgumentTypeError('--model argument must be one of {0} (received {1})'.format(
            list(str_to_model_type_map.keys()), model_str
        ))


class AccuracyMetric(Enum):
    Accuracy = 0
    F1 = 1

str_to_accuracy_metric_map = {
    'accuracy': AccuracyMetric.Accuracy,
    'f1': AccuracyMetric.F1
}

def accuracy_metric_arg(metric_str):
    if metric_str is None:
        return
    try:
        return str_to_accuracy_metric_map[metric_str.replace('_', '').replace('-', '').lower()]
    except KeyError:
        raise argparse.ArgumentTypeError('--accuracy-metric argument must be one of {0} (received {1})'.format(
            list(str_to_accuracy_metric_map.keys()), metric_str
        ))


class HeaderPrecision(Enum):
    Full = 0
    Short = 1

str_to_header_precision_map = {
    entry.name.lower(): entry for entry in HeaderPrecision
}

def header_precision_arg(precision_str):
    try:
        return str_to_header_precision_map[precision_str.lower()]
    except KeyError:
        raise argparse.ArgumentTypeError('--header-precision argument must be one of {0} (received {1})'.format(
            list(str_to_header_precision_map.keys()), precision_str
        ))

import logging
import logging.config
import os
import sys
import random
import argparse
import numpy as np
import yaml
from enum import Enum
from datetime import datetime
from fitdt import package_dir
from fitdt.args import cmd_args, validate_args
from fitdt.custom_models.dt.model_v1 import InvalidInputError, MIN_FEATURES


__all__ = [
    'env_cfg', 'cfg_from_yaml', 'logging_cfg', 'get_timestamp',
    'as_feature_matrix', 'float32_grid',
]

logger = logging.getLogger(__name__)


def env_cfg(argv=None):
    """Configure the environment to run the classifier"""
    parser = argparse.ArgumentParser("Fitness planner decision tree")
    parser = cmd_args(parser)
    args = parser.parse_args(argv)

    # overwrite if a yaml configuration file is given
    if args.yaml_cfg_file is not None:
        cfg_from_yaml(args, args.yaml_cfg_file)

    # check for errors
    validate_args(args)

    if args.deterministic:
        np.random.seed(args.global_seed)
        random.seed(args.global_seed)

    # configure logging
    logging_cfg(args)

    return args


def cfg_from_yaml(args, cfg_yaml_file):
    """Configure environment based on arguments from a yaml file
    """
    def replace_arg(name, value):
        # special handling for Enum type of arguments
        if isinstance(getattr(args, name, None), Enum) and value is not None:
            assert isinstance(value, str)
            enum_class = getattr(args, name).__class__
            try:
                value = next(entry for entry in enum_class if entry.name.lower() == value.lower())
            except StopIteration:
                raise ValueError(f"Unknown value '{value}' for '{name}', options: "
                                 f"{[entry.name.lower() for entry in enum_class]}")
        # special handling for lists (nargs='+/*/?')
        elif isinstance(getattr(args, name, None), list) and value is not None:
            value = [value] if not isinstance(value, list) else value
        setattr(args, name, value)

    # read configuration file
    with open(cfg_yaml_file, 'r') as stream:
        yaml_dict = yaml.safe_load(stream) or {}

    # inspect all arguments
    for name, value in yaml_dict.items():
        # we assume a two-level nested dictionary
        if isinstance(value, dict):
            # usually this branch gets executed
            for _name, _value in value.items():
                replace_arg(_name, _value)
        else:
            # this is rarely executed
            replace_arg(name, value)


def logging_cfg(args):
    """Configure logging for entire framework"""
    os.makedirs(args.log_dir, exist_ok=True)

    # set the name of the log file and directory
    timestr = get_timestamp()
    exp_full_name = timestr if args.name is None else args.name + '___' + timestr
    logdir = os.path.join(args.log_dir, exp_full_name)
    os.makedirs(logdir, exist_ok=True)

    # use the logging config file
    log_filename = os.path.join(logdir, exp_full_name + '.log')
    logging.config.fileConfig(
        os.path.join(package_dir, 'logging.conf'),
        disable_existing_loggers=False,
        defaults={
            'main_log_filename': os.path.join(args.log_dir, 'out.log'),
            'all_log_filename': log_filename,
        }
    )
    if args.verbose:
        for handler in logging.getLogger().handlers:
            if type(handler) == logging.StreamHandler:
                handler.setLevel(logging.DEBUG)

    # initialized logger and first messages
    logging.getLogger().logdir = logdir
    logger.log_filename = log_filename
    logger.info('Log file for this run: ' + os.path.realpath(log_filename))
    logger.debug("Command line: {}".format(" ".join(sys.argv)))
    arguments = {argument: getattr(args, argument) for argument in dir(args)
                 if not callable(getattr(args, argument)) and not argument.startswith('__')}
    logger.debug(f"Arguments: {arguments}")

    # Create a symbollic link to the last log file created (for easier access)
    try:
        os.unlink(os.path.join(args.log_dir, "latest_log_file"))
    except FileNotFoundError:
        pass
    try:
        os.unlink(os.path.join(args.log_dir, "latest_log_dir"))
    except FileNotFoundError:
        pass
    try:
        os.symlink(os.path.realpath(logdir), os.path.join(args.log_dir, "latest_log_dir"))
        os.symlink(os.path.realpath(log_filename), os.path.join(args.log_dir, "latest_log_file"))
    except OSError:
        logger.debug("Failed to create symlinks to latest logs")


def get_timestamp():
    return datetime.now().strftime("%Y.%m.%d-%H.%M.%S.%f")[:-3]


def as_feature_matrix(data, min_features=MIN_FEATURES):
    """Convert a batch of feature vectors to a 2-D float array, checking its width."""
    try:
        matrix = np.asarray(data, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Feature vectors must be numeric and of equal length: {e}")

    if matrix.ndim == 1 and matrix.size == 0:
        return matrix.reshape(0, min_features)
    if matrix.ndim != 2:
        raise InvalidInputError(f"Expected a 2-D array of feature vectors, got {matrix.ndim} dimension(s)")
    if matrix.shape[1] < min_features:
        raise InvalidInputError(f"Expected at least {min_features} features, got {matrix.shape[1]}")
    return matrix


def float32_grid(bounds, num_points):
    """Sample values a single-precision target can hold around the given thresholds.

    ``bounds`` maps a feature index to (low, high, thresholds). Every threshold
    contributes itself and its float32 neighbours, so ties and the smallest
    steps on either side are always covered.
    """
    grid = {}
    for feature_index, (low, high, thresholds) in bounds.items():
        values = np.linspace(low, high, num_points, dtype=np.float32)
        for threshold in thresholds:
            t = np.float32(threshold)
            values = np.append(values, [
                np.nextafter(t, np.float32(-np.inf)), t, np.nextafter(t, np.float32(np.inf))
            ])
        grid[feature_index] = np.unique(values.astype(np.float32))
    return grid

import logging
import re
import numpy as np


logger = logging.getLogger(__name__)


def logging_cfg(logger_name, logfile, to_stdout=False):
    """Get a formatter-less logger that writes generated code to ``logfile``."""
    this_logger = logging.getLogger(logger_name)
    this_logger.setLevel(logging.DEBUG)
    this_logger.propagate = False
    if this_logger.hasHandlers():
        for handler in this_logger.handlers:
            handler.close()
        this_logger.handlers.clear()

    simple_formatter = logging.Formatter('')

    file_handler = logging.FileHandler(logfile, mode='w')
    file_handler.setFormatter(simple_formatter)
    file_handler.setLevel(logging.DEBUG)
    this_logger.addHandler(file_handler)
    if to_stdout:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(simple_formatter)
        stream_handler.setLevel(logging.INFO)
        this_logger.addHandler(stream_handler)
    return this_logger


def close_logger(this_logger):
    """Flush and detach the handlers of a code-emission logger."""
    for handler in list(this_logger.handlers):
        handler.close()
        this_logger.removeHandler(handler)


def create_inputs_file_from_array(array, inputs_file, exclude_indices=None, separator=' ', modifier=None):
    """Create a file with the test vectors for the device from a given 2-D array."""
    if not isinstance(array, np.ndarray):
        raise ValueError("Input must be a numpy array")

    if modifier is None:
        modifier = lambda x: x
    if exclude_indices is None:
        exclude_indices = []

    if array.ndim == 2:
        array = np.delete(array, exclude_indices, axis=1)
        with open(inputs_file, 'w') as f:
            for row in array:
                f.write(separator.join([str(modifier(x)) for x in row]) + '\n')

    elif array.ndim == 1:
        array = np.delete(array, exclude_indices)
        with open(inputs_file, 'w') as f:
            for row in array:
                f.write(str(modifier(row)) + '\n')

    else:
        raise ValueError(f"Number of dimensions {array.ndim} is not supported. "
                         "Input array must be 1-D or 2-D")


def natural_sort_key(s):
    _nsre = re.compile('([0-9]+)')
    return [int(text) if text.isdigit() else text.lower()
            for text in re.split(_nsre, s)]

import logging
import numpy as np
from fitdt.args import HeaderPrecision
from fitdt.hw_templates.utils import logging_cfg, close_logger, natural_sort_key


logger = logging.getLogger(__name__)

DEFAULT_NAMESPACES = ('Eloquent', 'ML', 'Port')


def format_threshold(threshold, precision=HeaderPrecision.Full):
    """Render a threshold as a C literal.

    ``Full`` keeps every digit of the double. ``Short`` prints the shortest
    decimal that still rounds to the same single-precision value.
    """
    if precision == HeaderPrecision.Full:
        return repr(float(threshold))
    elif precision == HeaderPrecision.Short:
        return np.format_float_positional(np.float32(threshold), unique=True, trim='0')
    raise ValueError(f"Unknown header precision: {precision}")


def tree_to_c(tree, logger_c, class_name='DecisionTree', namespaces=DEFAULT_NAMESPACES,
              precision=HeaderPrecision.Full, inpname='x'):
    """Emit a header-only C++ class with the tree unrolled into nested branches."""
    logger_c.debug("#pragma once")
    logger_c.debug("")

    depth = 0
    for namespace in namespaces:
        logger_c.debug(f"{'    ' * depth}namespace {namespace} {{")
        depth += 1

    cls_indent = '    ' * depth
    logger_c.debug(f"{cls_indent}class {class_name} {{")
    logger_c.debug(f"{cls_indent}    public:")
    logger_c.debug(f"{cls_indent}        /**")
    logger_c.debug(f"{cls_indent}        * Predict class for features vector")
    logger_c.debug(f"{cls_indent}        */")
    logger_c.debug(f"{cls_indent}        int predict(float *{inpname}) {{")

    def recurse(node, depth):
        indent = "    " * depth
        if not node.is_leaf:
            threshold = format_threshold(node.threshold, precision)
            logger_c.debug(f"{indent}if ({inpname}[{node.feature_index}] <= {threshold}) {{")
            recurse(node.left, depth + 1)
            logger_c.debug(f"{indent}}}")
            logger_c.debug(f"{indent}else {{")
            recurse(node.right, depth + 1)
            logger_c.debug(f"{indent}}}")
        else:
            logger_c.debug(f"{indent}return {int(node.prediction)};")

    recurse(tree.root, depth + 3)

    logger_c.debug(f"{cls_indent}        }}")
    logger_c.debug(f"{cls_indent}}};")
    for namespace in reversed(namespaces):
        depth -= 1
        logger_c.debug(f"{'    ' * depth}}}")


def write_tree_to_c(tree, header_file, class_name='DecisionTree', namespaces=DEFAULT_NAMESPACES,
                    precision=HeaderPrecision.Full, inpname='x'):
    """Write the tree as a C header and return a summary of what was written."""
    # the logger is responsible for writing the header file
    logger_c = logging_cfg('c_header', header_file)
    try:
        tree_to_c(tree, logger_c, class_name=class_name, namespaces=namespaces,
                  precision=precision, inpname=inpname)
    finally:
        close_logger(logger_c)

    used_features = {f"{inpname}{feature_index}" for feature_index, _ in tree.thresholds()}
    metadata = {
        'inputs': sorted(used_features, key=natural_sort_key),
        'n_features_required': tree.n_features_required,
        'node_count': tree.node_count,
        'max_depth': tree.max_depth,
    }
    logger.info(f"Wrote {class_name} ({metadata['node_count']} nodes, depth {metadata['max_depth']}, "
                f"inputs: {', '.join(metadata['inputs'])}) to {header_file}")
    return metadata

import traceback
import logging
from fitdt.utils import env_cfg
from fitdt.evaluation.simple_eval import (
    perform_prediction, perform_basic_evaluation, perform_export, perform_parity_check
)

logger = logging.getLogger(__name__)


def main(argv=None):
    args = env_cfg(argv)

    ran_something = False
    if args.check_parity:
        logger.info("Checking the stored copies of the tree against the canonical function...")
        perform_parity_check(args)
        ran_something = True

    if args.features is not None:
        perform_prediction(args)
        ran_something = True

    elif args.dataset_file is not None:
        perform_basic_evaluation(args)
        ran_something = True

    if args.export_header is not None:
        logger.info("Exporting the tree as a C header...")
        perform_export(args)
        ran_something = True

    if not ran_something:
        logger.info("Nothing to do: give --features, --dataset-file, --export-header or --check-parity")


if __name__ == '__main__':
    try:
        main()
    except Exception:
        if logger is not None:
            # We catch unhandled exceptions here in order to log them to the log file
            # However, using the logger as-is to do that means we get the trace twice in stdout - once from the
            # logging operation and once from re-raising the exception. So we remove the stdout logging handler
            # before logging the exception
            root_logger = logging.getLogger()
            handlers_bak = root_logger.handlers
            root_logger.handlers = [h for h in root_logger.handlers if type(h) != logging.StreamHandler]
            logger.error(traceback.format_exc())
            root_logger.handlers = handlers_bak
        raise
    except KeyboardInterrupt:
        logger.info("")
        logger.info("--- Keyboard Interrupt ---")
    finally:
        logfiles = [handler.baseFilename for handler in logging.getLogger().handlers if
                    type(handler) == logging.FileHandler]
        if logfiles:
            logger.info(f"Log file(s) for this run in {' | '.join(logfiles)}")

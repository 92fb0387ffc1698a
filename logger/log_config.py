import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(verbose=False, log_file=None):
    """
    Configures the main 'vmdatasets' logger.

    Should be called ONCE from the entry point.
    Other modules should use `logging.getLogger('vmdatasets.<area>')`.
    """
    logger = logging.getLogger('vmdatasets')
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # --- Clean ONLY existing handlers attached DIRECTLY to 'vmdatasets' ---
    for handler in list(logger.handlers):
        try:
            handler.close()
        finally:
            logger.removeHandler(handler)

    # 1. Stream Handler (Console) - Always add
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # 2. File Handler - Add if a log file is configured
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning(f"Cannot open log file '{log_file}': {e}. File logging disabled.")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    # 'vmdatasets' is top-level; sub-loggers propagate to it
    logger.propagate = False
    return logger

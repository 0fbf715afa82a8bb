import importlib.metadata
import logging

__version__ = importlib.metadata.version("lubm-bench")


logger = logging.Logger("lubm_bench")
logger.setLevel(logging.INFO)

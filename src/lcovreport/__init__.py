import logging
from importlib.metadata import version

__version__ = version("lcovreport")

logger = logging.getLogger("lcovreport")

__all__ = ["__version__", "logger"]

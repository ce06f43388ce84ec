import logging
from importlib.metadata import version

__version__ = version("covgraph")

logger = logging.getLogger("covgraph")

__all__ = ["__version__", "logger"]

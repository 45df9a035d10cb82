"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Config validation (validators)
    - Color variation (color)
    - Curve math (geometry)
    - Atomic I/O (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers at import time
(path_ops, stroke_engine).

Convenience imports:
    from inkflow.utils import fs, color, geometry, validators
    from inkflow.utils.logging_config import setup_logging, get_logger
"""

# Re-export commonly used modules for convenience
from . import color
from . import fs
from . import geometry
from . import logging_config
from . import validators

# Common functions for direct import
from .logging_config import get_logger, log_context, push_context, setup_logging

__all__ = [
    # Modules
    'color',
    'fs',
    'geometry',
    'logging_config',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
    'log_context',
]

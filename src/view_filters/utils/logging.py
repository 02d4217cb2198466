"""Logging utilities for the filter engine."""

import logging
import sys

from view_filters.config import settings

# Create and configure package logger
logger = logging.getLogger("view_filters")

logging_level = getattr(logging, settings.logging_level.upper(), logging.INFO)

logger.setLevel(logging_level)

formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Create and configure stdout handler
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(console_handler)

# Prevent propagation to root logger to avoid duplicate logs
logger.propagate = False

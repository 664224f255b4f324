"""
Utility modules - Shared utilities for the client

This module should NEVER import from gtasks.integrations to keep the
import hierarchy one-directional.
"""

# ============================================
# CONFIGURATION
# ============================================
from .config import ConfigDefaults, TasksSettings, load_config

# ============================================
# LOGGING
# ============================================
from .logger import setup_logger, reset_logging

__all__ = [
    'ConfigDefaults',
    'TasksSettings',
    'load_config',
    'setup_logger',
    'reset_logging',
]

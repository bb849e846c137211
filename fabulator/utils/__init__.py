"""Fabulator utilities module.

This module contains shared utilities used across fabulator.

Components:
- exceptions: Custom exception classes
- settings: Configuration and settings management
"""

from fabulator.utils.exceptions import *  # noqa: F401, F403
from fabulator.utils.settings import *  # noqa: F401, F403

"""
Core utilities.

This module provides:
- Physical constants
- Units and unit conversion
- Configuration and logging
- Error and warning types
"""

from dbroad.core import constants
from dbroad.core import units
from dbroad.core import config
from dbroad.core import logging_config
from dbroad.core.errors import InvalidParameterError, DomainWarning, find_stack_level

__all__ = [
    # Modules
    "constants",
    "units",
    "config",
    "logging_config",
    # Errors
    "InvalidParameterError",
    "DomainWarning",
    "find_stack_level",
]

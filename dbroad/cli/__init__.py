"""
Command-line interface for dbroad.

This module provides CLI tools for:
- Tabulating broadening terms versus detector angle
- Plotting the broadening curves
- Scanning one model parameter
"""

__all__ = []

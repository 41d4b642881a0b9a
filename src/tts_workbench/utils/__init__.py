"""
TTS Workbench Utilities Module

Utility functions and helpers:
- logger: Logging configuration
"""
from .logger import logger, set_console_level

__all__ = ['logger', 'set_console_level']

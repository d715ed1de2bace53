"""
API module initialization
"""

from . import endpoints

__all__ = ["endpoints"]

"""
ifactor.interfaces - User interfaces for iFactor

This package contains the console interface for two players sharing
a terminal.
"""

# Don't import anything here to avoid circular imports
__all__ = []

"""
Top-level package for the Student Records API.

All functionality lives in submodules under ``app``.
"""

__all__ = []

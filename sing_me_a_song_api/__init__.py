"""
Top‑level package for the Sing Me A Song API.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []

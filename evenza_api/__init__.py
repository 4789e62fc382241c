"""
Top‑level package for the Evenza API.

The package provides no public exports; all functionality lives in
submodules under ``app``, importable by fully qualified names such as
``evenza_api.app.main``.
"""

__all__ = []

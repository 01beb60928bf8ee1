"""
Top‑level package for the Web Archive Tag API.

This file makes ``web_archive_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``web_archive_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []

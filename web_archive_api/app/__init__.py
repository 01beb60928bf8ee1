"""
Application package initializer.

This package contains the main entrypoint for the tag API and its
submodules.  Infrastructure (settings, logging, database, auth) lives
in ``core``, request and response models in ``schemas``, persistence
in ``services`` and the HTTP routes in ``api/v1/endpoints``.
"""

from .main import app  # noqa: F401

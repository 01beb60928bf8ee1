"""
Uniform response envelope.

Every tag endpoint answers with the same JSON shape::

    {"code": 0, "message": "ok", "data": ...}           # success
    {"code": 400, "message": "Name is required", "data": null}

Handlers return ``success(...)`` directly and raise ``ResultError`` for
failures; the exception handler registered in ``main`` turns the
exception into an error envelope whose HTTP status equals ``code``.
"""

from typing import Any, Dict

from fastapi.encoders import jsonable_encoder


SUCCESS_CODE = 0


class ResultError(Exception):
    """A handled failure that should be reported to the client."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def success(data: Any = None) -> Dict[str, Any]:
    """Wrap ``data`` in a success envelope."""
    return {"code": SUCCESS_CODE, "message": "ok", "data": jsonable_encoder(data, by_alias=True)}


def error(code: int, message: str) -> Dict[str, Any]:
    """Build an error envelope."""
    return {"code": code, "message": message, "data": None}


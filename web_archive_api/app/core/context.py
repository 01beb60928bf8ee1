"""
Per-request context.

Every handler receives a ``RequestContext`` carrying the database
connection opened for this request and the authenticated user.  The
connection is closed once the response has been produced.
"""

import sqlite3
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict

from fastapi import Depends

from .db import get_connection
from .security import get_current_user


@dataclass
class RequestContext:
    db: sqlite3.Connection
    user: Dict[str, Any]


async def get_request_context(
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> AsyncIterator[RequestContext]:
    """FastAPI dependency yielding the context for one request."""
    conn = get_connection()
    try:
        yield RequestContext(db=conn, user=current_user)
    finally:
        conn.close()

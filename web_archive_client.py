"""Web Archive tag API client.

A thin wrapper around the tag endpoints of the Web Archive API, for
scripts and tools that want to label archived pages without dealing
with HTTP directly.  The client uses the ``requests`` library.

Methods:

* :meth:`list_tags` – return every tag.
* :meth:`create_tag` – create a tag with a name and optional colour.
* :meth:`update_tag` – rename or recolour a tag.
* :meth:`delete_tag` – remove a tag.
* :meth:`bind_pages` – attach a tag to pages.
* :meth:`unbind_pages` – detach a tag from pages.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary with
keys ``status_code`` and ``message``.  The message is taken from the
server's error envelope when there is one.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class WebArchiveTagClient:
    """Client for the ``/api/v1/tags`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        prefix: str = "/api/v1/tags",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``https://archive.example.com``.
            api_key: Bearer token sent in the ``Authorization`` header.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            prefix: Path under which the tag routes are mounted.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.prefix = prefix.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request and unwrap the response envelope.

        Returns:
            A tuple ``(data, error)`` where ``data`` is the envelope's
            ``data`` field.
        """
        url = f"{self.base_url}{self.prefix}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            envelope = response.json() if response.content else {}
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = self._error_message(exc.response) or str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            # Also covers a body that is not valid JSON.
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

        if not isinstance(envelope, dict) or envelope.get("code", 0) != 0:
            message = envelope.get("message") if isinstance(envelope, dict) else None
            code = envelope.get("code") if isinstance(envelope, dict) else None
            logger.error("API request failed (%s): %s", code, message)
            return None, {"status_code": code, "message": message or "Unexpected response"}
        return envelope.get("data"), None

    @staticmethod
    def _error_message(response: Optional[requests.Response]) -> str:
        if response is None:
            return ""
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("message") or body.get("detail") or str(body)
        return str(body)

    # ------------------------------------------------------------------
    # Tag operations
    # ------------------------------------------------------------------
    def list_tags(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all tags.

        Returns:
            A tuple ``(tags, error)``.  ``tags`` is empty on failure.
        """
        data, error = self._request("GET", "/all")
        if error:
            return [], error
        return data or [], None

    def create_tag(self, name: str, color: Optional[str] = None) -> Tuple[bool, Optional[Error]]:
        payload: Dict[str, Any] = {"name": name}
        if color is not None:
            payload["color"] = color
        data, error = self._request("POST", "/create", json_body=payload)
        return bool(data) and error is None, error

    def update_tag(
        self, tag_id: int, *, name: Optional[str] = None, color: Optional[str] = None
    ) -> Tuple[bool, Optional[Error]]:
        """Rename and/or recolour a tag.  Omitted fields stay unchanged."""
        payload: Dict[str, Any] = {"id": tag_id}
        if name is not None:
            payload["name"] = name
        if color is not None:
            payload["color"] = color
        data, error = self._request("POST", "/update", json_body=payload)
        return bool(data) and error is None, error

    def delete_tag(self, tag_id: int) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("DELETE", "/delete", params={"id": tag_id})
        return bool(data) and error is None, error

    def bind_pages(self, tag_id: int, page_ids: Iterable[int]) -> Tuple[bool, Optional[Error]]:
        data, error = self._request(
            "POST", "/bind_page", json_body={"id": tag_id, "pageIds": list(page_ids)}
        )
        return bool(data) and error is None, error

    def unbind_pages(self, tag_id: int, page_ids: Iterable[int]) -> Tuple[bool, Optional[Error]]:
        data, error = self._request(
            "POST", "/unbind_page", json_body={"id": tag_id, "pageIds": list(page_ids)}
        )
        return bool(data) and error is None, error

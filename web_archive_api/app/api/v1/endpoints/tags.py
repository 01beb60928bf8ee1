"""
Tag endpoints for API v1.

Routes for listing, creating, updating and deleting tags, and for
attaching tags to archived pages or detaching them.  Bodies are read as
raw JSON and checked by the ``validate_*`` functions from
``schemas.tag`` so the client gets the same short messages whatever
shape the payload has.  Every response uses the envelope from
``core.result``.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from web_archive_api.app.core.context import RequestContext, get_request_context
from web_archive_api.app.core.result import ResultError, success
from web_archive_api.app.schemas.tag import (
    validate_create,
    validate_delete,
    validate_page_binding,
    validate_update,
)
from web_archive_api.app.services.tag_service import TagNotFoundError, TagService

router = APIRouter()

logger = logging.getLogger(__name__)


async def _json_body(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict; anything else counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        logger.debug("Ignoring unparseable JSON body on %s", request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


@router.get("/all")
async def list_tags(ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    """Return every tag."""
    tags = await TagService.select_all_tags(ctx.db)
    return success(tags)


@router.post("/create")
async def create_tag(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    """Create a tag.  ``color`` defaults to white."""
    data = validate_create(await _json_body(request))
    if await TagService.insert_tag(ctx.db, data.name, data.color):
        return success(True)
    raise ResultError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create tag")


@router.post("/update")
async def update_tag(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    """Change the name and/or colour of a tag."""
    data = validate_update(await _json_body(request))
    if await TagService.update_tag(ctx.db, data.id, name=data.name, color=data.color):
        return success(True)
    raise ResultError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update tag")


@router.delete("/delete")
async def delete_tag(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    data = validate_delete(dict(request.query_params))
    if await TagService.delete_tag_by_id(ctx.db, data.id):
        return success(True)
    raise ResultError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete tag")


@router.post("/bind_page")
async def bind_pages(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    """Attach the tag to the given pages.

    Ids already attached are kept once.  Unknown tag ids give 404.
    """
    data = validate_page_binding(await _json_body(request))
    try:
        bound = await TagService.bind_pages(ctx.db, data.id, data.page_ids)
    except TagNotFoundError:
        raise ResultError(status.HTTP_404_NOT_FOUND, "Tag not found")
    if bound:
        return success(True)
    raise ResultError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to bind pages")


@router.post("/unbind_page")
async def unbind_pages(request: Request, ctx: RequestContext = Depends(get_request_context)) -> Dict[str, Any]:
    """Detach the tag from the given pages."""
    data = validate_page_binding(await _json_body(request))
    try:
        unbound = await TagService.unbind_pages(ctx.db, data.id, data.page_ids)
    except TagNotFoundError:
        raise ResultError(status.HTTP_404_NOT_FOUND, "Tag not found")
    if unbound:
        return success(True)
    raise ResultError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to unbind pages")

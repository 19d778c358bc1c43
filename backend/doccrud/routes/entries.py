"""
DocCRUD Backend - Generic Entries Route Handlers
=================================================

What:  Schema-less endpoints over the entries collection.
How:   Like the resource routers, built by a factory around a DocumentService.
       Only "document not found" on detail is translated; every other store
       error propagates as is.

Endpoints:
    POST /entries        one object or an array of objects; response mirrors the input shape
    GET  /entries/{key}  one entry, 404 "The entry does not exist"
    GET  /entries        keys of all entries, in collection iteration order
"""

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Body, Path
from fastapi.responses import JSONResponse

from doccrud.schemas.document import DocumentResponse, ErrorResponse, encode_document
from doccrud.services.document_service import DocumentService

ENTRY_NOT_FOUND_MESSAGE = "The entry does not exist"


def create_entries_router(service: DocumentService, *, prefix: str = "/entries") -> APIRouter:
    router = APIRouter(prefix=prefix, tags=["entry"])

    @router.post(
        "",
        name="entry.create",
        responses={200: {"model": Union[DocumentResponse, List[DocumentResponse]]}},
        summary="Store entries",
    )
    async def create_entries(
        body: Union[Dict[str, Any], List[Dict[str, Any]]] = Body(
            ..., description="Entry or entries to store"
        ),
    ) -> JSONResponse:
        """Stores one entry, or each entry of an array in order."""
        if isinstance(body, list):
            created = await service.create_many(body)
            return JSONResponse(encode_document(created))
        created = await service.create_many([body])
        return JSONResponse(encode_document(created[0]))

    @router.get(
        "/{key}",
        name="entry.detail",
        responses={
            200: {"model": DocumentResponse},
            404: {"model": ErrorResponse, "description": ENTRY_NOT_FOUND_MESSAGE},
        },
        summary="Retrieve an entry",
    )
    async def get_entry(
        key: str = Path(..., description="Key of the entry"),
    ) -> JSONResponse:
        doc = await service.detail(key, not_found_message=ENTRY_NOT_FOUND_MESSAGE)
        return JSONResponse(encode_document(doc))

    @router.get(
        "",
        name="entry.keys",
        responses={200: {"model": List[str]}},
        summary="List entry keys",
    )
    async def list_entry_keys() -> JSONResponse:
        """Returns the key of every entry, nothing else."""
        return JSONResponse(await service.keys())

    return router

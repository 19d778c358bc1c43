"""
DocCRUD Backend - Resource Route Handlers (people, todo)
=========================================================

What:  Builds the five-verb CRUD router for one resource collection.
How:   `create_resource_router()` closes over a DocumentService built by the
       app factory; handlers only deal with HTTP details (status codes,
       Location header, body decoding) and delegate to the service.
Who:   doccrud.main mounts one router per resource at /<resource>.

Endpoints (R = resource):
    GET    /R         list all documents         200
    POST   /R         create                     201 + Location, 409 duplicate
    GET    /R/{key}   detail                     200, 404
    PUT    /R/{key}   replace                    200, 404, 409
    PATCH  /R/{key}   update, then re-read       200, 404, 409
    DELETE /R/{key}   remove                     204, 404
"""

import logging
from typing import Any, Dict, List, Type
from urllib.parse import quote

from fastapi import APIRouter, Body, Path, Request, Response, status
from fastapi.responses import JSONResponse

from doccrud.schemas.document import (
    DocumentModel,
    DocumentResponse,
    ErrorResponse,
    encode_document,
)
from doccrud.services.document_service import DocumentService

logger = logging.getLogger(__name__)


def create_resource_router(
    service: DocumentService,
    schema: Type[DocumentModel],
    *,
    prefix: str,
    label: str,
) -> APIRouter:
    """
    Build the CRUD router for one resource.

    Args:
        service: Service bound to the resource's collection
        schema:  Model that create and replace bodies must satisfy
        prefix:  Mount path, e.g. "/people"
        label:   Singular noun used in docs, tags and route names, e.g. "person"

    Returns:
        An APIRouter whose detail route is named "<label>.detail" so the
        create handler can reverse it into the Location header.
    """
    router = APIRouter(prefix=prefix, tags=[label])
    detail_route = f"{label}.detail"
    key_description = f"The key of the {label}"

    @router.get(
        "",
        name=f"{label}.list",
        responses={200: {"model": List[DocumentResponse]}},
        summary=f"List all {label} documents",
    )
    async def list_documents() -> JSONResponse:
        """Retrieves a list of all documents in the collection."""
        docs = await service.list()
        return JSONResponse(encode_document(docs))

    @router.post(
        "",
        name=f"{label}.create",
        status_code=status.HTTP_201_CREATED,
        responses={
            201: {"model": DocumentResponse, "description": f"The created {label}"},
            409: {"model": ErrorResponse, "description": f"The {label} already exists"},
        },
        summary=f"Create a new {label}",
    )
    async def create_document(
        request: Request,
        body: schema = Body(..., description=f"The {label} to create"),  # type: ignore[valid-type]
    ) -> JSONResponse:
        """Creates a new document from the request body and returns the saved document."""
        doc = await service.create(body.to_document())
        # url_for inserts path params unescaped
        location = str(request.url_for(detail_route, key=quote(doc["_key"], safe="")))
        return JSONResponse(
            encode_document(doc),
            status_code=status.HTTP_201_CREATED,
            headers={"Location": location},
        )

    @router.get(
        "/{key}",
        name=detail_route,
        responses={
            200: {"model": DocumentResponse},
            404: {"model": ErrorResponse, "description": f"The {label} does not exist"},
        },
        summary=f"Fetch a {label}",
    )
    async def get_document(
        key: str = Path(..., description=key_description),
    ) -> JSONResponse:
        """Retrieves a document by its key."""
        doc = await service.detail(key)
        return JSONResponse(encode_document(doc))

    @router.put(
        "/{key}",
        name=f"{label}.replace",
        responses={
            200: {"model": DocumentResponse, "description": f"The new {label}"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        summary=f"Replace a {label}",
    )
    async def replace_document(
        key: str = Path(..., description=key_description),
        body: schema = Body(..., description=f"The data to replace the {label} with"),  # type: ignore[valid-type]
    ) -> JSONResponse:
        """Replaces an existing document with the request body and returns the new document."""
        doc = await service.replace(key, body.to_document())
        return JSONResponse(encode_document(doc))

    @router.patch(
        "/{key}",
        name=f"{label}.update",
        responses={
            200: {"model": DocumentResponse, "description": f"The updated {label}"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
        },
        summary=f"Update a {label}",
    )
    async def update_document(
        key: str = Path(..., description=key_description),
        patch: Dict[str, Any] = Body(..., description=f"The data to update the {label} with"),
    ) -> JSONResponse:
        """Patches a document with the request body and returns the updated document."""
        doc = await service.update(key, patch)
        return JSONResponse(encode_document(doc))

    @router.delete(
        "/{key}",
        name=f"{label}.delete",
        status_code=status.HTTP_204_NO_CONTENT,
        responses={404: {"model": ErrorResponse}},
        summary=f"Remove a {label}",
    )
    async def delete_document(
        key: str = Path(..., description=key_description),
    ) -> Response:
        """Deletes a document from the database."""
        await service.delete(key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router

"""
DocCRUD Backend - Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract of every endpoint.
How:   FastAPI validates request bodies against these models and uses them in
       the OpenAPI docs. Documents are declared once here; decoding a body
       (`model_validate`) and encoding a stored document (`encode_document`)
       are separate steps so a stored document is never re-validated on the
       way out.

Document models accept unknown attributes and keep them. The optional
caller-chosen key is exposed under its store name `_key`.
"""

from typing import Any, Dict, List, Optional, Union

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


# ══════════════════════════════════════════════════════════════════════════
# Document Models
# ══════════════════════════════════════════════════════════════════════════


class DocumentModel(BaseModel):
    """Base for stored documents: free-form, with an optional `_key`."""

    model_config = ConfigDict(extra="allow")

    key: Optional[str] = Field(
        default=None,
        alias="_key",
        description="Caller-chosen document key; generated by the store when omitted",
    )

    def to_document(self) -> Dict[str, Any]:
        """Plain dict ready for the store, with the store's attribute names."""
        doc = self.model_dump(by_alias=True)
        if doc.get("_key") is None:
            doc.pop("_key", None)
        return doc


class PersonDocument(DocumentModel):
    """A person. `name` and `age` are required; other attributes are kept."""

    name: str = Field(description="Display name")
    age: Union[StrictInt, StrictFloat] = Field(
        description="Age in years; booleans and numeric strings are rejected"
    )


class TodoDocument(DocumentModel):
    """A todo item. Free-form."""


class DocumentResponse(BaseModel):
    """Documentation-only shape of a stored document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: str = Field(alias="_key", description="Document key")
    id: str = Field(alias="_id", description="Document handle: <collection>/<key>")
    rev: str = Field(alias="_rev", description="Current revision token")


def encode_document(doc: Any) -> Any:
    """Serialize a stored document (or list of them) for a JSON response."""
    return jsonable_encoder(doc)


# ══════════════════════════════════════════════════════════════════════════
# Illustrative Endpoint Models
# ══════════════════════════════════════════════════════════════════════════


class SumRequest(BaseModel):
    values: List[Union[StrictInt, StrictFloat]] = Field(description="Values to add together")


class SumResponse(BaseModel):
    result: Union[int, float] = Field(description="Sum of the input values")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "document not found",
            "request_id": "550e8400"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

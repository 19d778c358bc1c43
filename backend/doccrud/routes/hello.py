"""
DocCRUD Backend - Greeting and Sum Routes
==========================================

Standalone routes with no store access:
    GET  /hello-world    "Hello World!"
    GET  /hello/{name}   "Hello {name}"
    POST /sum            {"values": [...]} → {"result": ...}
"""

from fastapi import APIRouter, Path
from fastapi.responses import PlainTextResponse

from doccrud.schemas.document import SumRequest, SumResponse

router = APIRouter(tags=["hello"])


@router.get(
    "/hello-world",
    response_class=PlainTextResponse,
    summary="Generic greeting",
    description="Prints a generic greeting.",
)
async def hello_world() -> str:
    return "Hello World!"


@router.get(
    "/hello/{name}",
    response_class=PlainTextResponse,
    summary="Personalized greeting",
    description="Prints a personalized greeting.",
)
async def hello_name(name: str = Path(..., description="Name to greet")) -> str:
    return f"Hello {name}"


@router.post(
    "/sum",
    response_model=SumResponse,
    summary="Add up numbers",
    description="Calculates the sum of an array of number values.",
)
async def sum_values(body: SumRequest) -> SumResponse:
    return SumResponse(result=sum(body.values, 0))

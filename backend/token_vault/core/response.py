from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


def trace_id_from_request(request: Request) -> str:
    return getattr(request.state, "trace_id", "-")


def ok(data: Any, trace_id: str) -> dict:
    return {"code": 0, "message": "ok", "data": data, "trace_id": trace_id}


def error(code: int, message: str, trace_id: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"code": code, "message": message, "data": None, "trace_id": trace_id},
    )

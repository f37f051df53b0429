from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from token_vault.core.database import get_db
from token_vault.core.response import error, ok, trace_id_from_request
from token_vault.schemas.tokens import DetokenizeRequest, TokenizeRequest
from token_vault.services.tokenization_service import TokenizationError, build_service

router = APIRouter()


@router.post("/tokens/tokenize")
def tokenize_api(
    payload: TokenizeRequest,
    request: Request,
    x_operator: str | None = Header(default=None, max_length=64),
    db: Session = Depends(get_db),
):
    trace_id = trace_id_from_request(request)
    try:
        token = build_service(db).tokenize(
            payload.plaintext, payload.category, created_by=x_operator
        )
    except TokenizationError as exc:
        return error(exc.code, exc.message, trace_id, status_code=exc.status_code)
    return ok({"token": token, "category": payload.category.value}, trace_id)


@router.post("/tokens/detokenize")
def detokenize_api(
    payload: DetokenizeRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    trace_id = trace_id_from_request(request)
    try:
        plaintext = build_service(db).detokenize(payload.token, payload.category)
    except TokenizationError as exc:
        return error(exc.code, exc.message, trace_id, status_code=exc.status_code)
    return ok({"plaintext": plaintext, "category": payload.category.value}, trace_id)

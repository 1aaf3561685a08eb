"""Validation API -- run the rule engine and optional remote checks."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from appcast.deps import get_remote_verifier
from appcast.document.parser import parse_document
from appcast.remote.verifier import RemoteVerifier
from appcast.validator.models import ValidationResult
from appcast.validator.pipeline import merge_diagnostics, validate_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["validate"])


class ValidateRequest(BaseModel):
    xml: str
    check_urls: bool = False


@router.post("/validate", response_model=ValidationResult)
async def validate_appcast(
    body: ValidateRequest,
    verifier: RemoteVerifier = Depends(get_remote_verifier),
) -> ValidationResult:
    """Validate an appcast; with ``check_urls`` its URLs are probed too."""
    parsed = parse_document(body.xml)
    result = validate_document(parsed.document, parsed.diagnostics)
    if body.check_urls and parsed.document.root is not None:
        remote = await verifier.verify(parsed.document)
        result = merge_diagnostics(result, remote)
    logger.info(
        "Validated %d bytes: valid=%s errors=%d warnings=%d",
        len(body.xml),
        result.valid,
        result.error_count,
        result.warning_count,
    )
    return result


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from starledger.core.exceptions import (
    BlockInvalid,
    ChainInvalid,
    ChallengeExpired,
    InvalidAddress,
    MalformedChallenge,
    PayloadError,
    SignatureInvalid,
    StarLedgerError,
)


class ApiError(Exception):
    def __init__(self, code: str, message: str, status: int = 400, **extra: object) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.extra = extra


# Core exception -> (code, HTTP status). Order matters: first isinstance match wins.
_LEDGER_ERRORS: list[tuple[type[StarLedgerError], str, int]] = [
    (ChallengeExpired, "ownership.request_timeout", 408),
    (SignatureInvalid, "ownership.signature_invalid", 401),
    (MalformedChallenge, "ownership.malformed_challenge", 400),
    (InvalidAddress, "ownership.invalid_address", 400),
    (PayloadError, "payload.invalid", 400),
    (ChainInvalid, "chain.invalid", 409),
    (BlockInvalid, "chain.block_invalid", 500),
]


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    body = {"error": {"code": exc.code, "message": exc.message, **exc.extra}}
    return JSONResponse(status_code=exc.status, content=body)


async def ledger_error_handler(request: Request, exc: StarLedgerError) -> JSONResponse:
    code, status = "ledger.error", 500
    for exc_type, c, s in _LEDGER_ERRORS:
        if isinstance(exc, exc_type):
            code, status = c, s
            break
    body = {"error": {"code": code, "message": str(exc)}}
    return JSONResponse(status_code=status, content=body)

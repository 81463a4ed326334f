from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_registry
from api.schemas.blocks import FaultResponse, ValidationResponse
from starledger.registry import StarRegistry

router = APIRouter()


@router.get("/validateChain", response_model=ValidationResponse)
def validate_chain(registry: StarRegistry = Depends(get_registry)) -> ValidationResponse:
    faults = registry.validate_chain()
    return ValidationResponse(valid=not faults, faults=[FaultResponse.from_fault(f) for f in faults])

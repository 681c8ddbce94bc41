"""
Routes: carrier side — cadastro, rascunho, submissão e gating.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import Services, get_actor, get_services
from src.api.schemas.responses import (
    ApplicationSummary,
    CarrierResponse,
    GatingResponse,
    RegisterCarrierRequest,
    StartApplicationRequest,
    SubmitRequest,
    SubmitResponse,
    details_dict,
)
from src.core.entities.common import Actor
from src.core.errors import NotFound

router = APIRouter()


@router.post("/carriers", response_model=CarrierResponse, status_code=201)
def register_carrier(req: RegisterCarrierRequest, services: Services = Depends(get_services)):
    carrier = services.register_carrier.execute(**req.model_dump())
    return CarrierResponse.from_entity(carrier)


@router.get("/carriers/{carrier_id}", response_model=CarrierResponse)
def get_carrier(carrier_id: str, services: Services = Depends(get_services)):
    carrier = services.repository.get_carrier(carrier_id)
    if carrier is None:
        raise NotFound(f"Carrier {carrier_id} not found", {"carrier_id": carrier_id})
    return CarrierResponse.from_entity(carrier)


@router.post("/carriers/{carrier_id}/applications", response_model=ApplicationSummary, status_code=201)
def start_application(
    carrier_id: str,
    req: StartApplicationRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services),
):
    """Abre uma aplicação em `draft` para o carrier."""
    app = services.start_application.execute(
        carrier_id, actor, carrier_type=req.carrier_type, details=details_dict(req.details),
    )
    return ApplicationSummary.from_entity(app)


@router.post("/carriers/{carrier_id}/applications/submit", response_model=SubmitResponse)
def submit_application(
    carrier_id: str,
    req: SubmitRequest | None = None,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services),
):
    """
    draft → pending.

    Falha com 422 INCOMPLETE_DOCUMENTS listando os tipos que faltam.
    """
    expected_version = req.expected_version if req else None
    application_id = services.submit_application.execute(carrier_id, actor, expected_version=expected_version)
    app = services.repository.get_application(application_id)
    return SubmitResponse(application_id=application_id, status=app.status.value)


@router.get("/carriers/{carrier_id}/can-transact", response_model=GatingResponse)
def can_transact(carrier_id: str, services: Services = Depends(get_services)):
    return GatingResponse(carrier_id=carrier_id, can_transact=services.gating.can_transact(carrier_id))

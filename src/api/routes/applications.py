"""
Routes: aplicação — detalhes, uploads e leitura.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import Services, get_actor, get_services
from src.api.schemas.responses import (
    ApplicationDetailResponse,
    ApplicationSummary,
    DocumentResponse,
    SaveDraftRequest,
    UploadDocumentRequest,
    details_dict,
)
from src.core.entities.common import Actor
from src.core.use_cases.get_application import describe_document
from src.core.use_cases.start_application import ensure_owner_or_admin

router = APIRouter()


@router.patch("/applications/{application_id}/details", response_model=ApplicationSummary)
def save_draft(
    application_id: str,
    req: SaveDraftRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services),
):
    app = services.save_draft.execute(
        application_id,
        details_dict(req.details) or {},
        actor,
        carrier_type=req.carrier_type,
        expected_version=req.expected_version,
    )
    return ApplicationSummary.from_entity(app)


@router.post("/applications/{application_id}/documents", response_model=DocumentResponse, status_code=201)
def upload_document(
    application_id: str,
    req: UploadDocumentRequest,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services),
):
    """
    Registra os metadados de um arquivo já enviado ao storage.

    Um novo upload do mesmo tipo substitui o anterior.
    """
    doc = services.upload_document.execute(
        application_id, req.document_type, req.file_reference, actor, file_name=req.file_name,
    )
    app = services.repository.get_application(application_id)
    return DocumentResponse.from_view(describe_document(doc, app.carrier_type, services.registry))


@router.get("/applications/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: str,
    actor: Actor = Depends(get_actor),
    services: Services = Depends(get_services),
):
    """Aplicação + documentos atuais (ordem de revisão) + prontidão + histórico."""
    view = services.get_application.execute(application_id)
    ensure_owner_or_admin(actor, view.application.carrier_id)
    return ApplicationDetailResponse.from_view(view)

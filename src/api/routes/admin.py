"""
Routes: admin — fila de revisão, estatísticas e decisões.
"""

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import Services, get_actor, get_services
from src.api.schemas.responses import (
    ApplicationSummary,
    DecisionRequest,
    QueueResponse,
    ReopenRequest,
    SegmentedQueueResponse,
    StatusResponse,
)
from src.core.entities.common import Actor
from src.core.errors import PermissionDenied

router = APIRouter()


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise PermissionDenied("Admin access required", {"actor_id": actor.id})
    return actor


@router.get("/admin/applications", response_model=QueueResponse | SegmentedQueueResponse)
def review_queue(
    status: list[str] | None = Query(default=None),
    carrier_type: str | None = None,
    segmented: bool = False,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Actor = Depends(require_admin),
    services: Services = Depends(get_services),
):
    """
    Fila de revisão, submitted_at desc.

    Sem `status`, lista pending + under_review. Com `segmented=true`
    devolve duas listas (solo / enterprise).
    """
    queue = services.review_queue
    if segmented:
        segments = queue.segmented(status, limit=limit)
        return SegmentedQueueResponse(**{
            key: [ApplicationSummary.from_entity(a) for a in apps] for key, apps in segments.items()
        })
    apps = queue.list_queue(status, carrier_type=carrier_type, limit=limit, offset=offset)
    return QueueResponse(items=[ApplicationSummary.from_entity(a) for a in apps], count=len(apps))


@router.get("/admin/stats")
def stats(_: Actor = Depends(require_admin), services: Services = Depends(get_services)):
    return services.review_queue.stats()


@router.post("/admin/applications/{application_id}/decision", response_model=StatusResponse)
def decide_application(
    application_id: str,
    req: DecisionRequest,
    actor: Actor = Depends(require_admin),
    services: Services = Depends(get_services),
):
    """approve | reject | hold | start_review. reject/hold exigem `reason`."""
    status = services.decide_application.execute(
        application_id, req.decision, actor, reason=req.reason, expected_version=req.expected_version,
    )
    return StatusResponse(id=application_id, status=status.value)


@router.post("/admin/applications/{application_id}/reopen", response_model=StatusResponse)
def reopen_application(
    application_id: str,
    req: ReopenRequest | None = None,
    actor: Actor = Depends(require_admin),
    services: Services = Depends(get_services),
):
    expected_version = req.expected_version if req else None
    status = services.reopen_application.execute(application_id, actor, expected_version=expected_version)
    return StatusResponse(id=application_id, status=status.value)


@router.post("/admin/documents/{document_id}/decision", response_model=StatusResponse)
def decide_document(
    document_id: str,
    req: DecisionRequest,
    actor: Actor = Depends(require_admin),
    services: Services = Depends(get_services),
):
    """approve | reject de um documento. Nunca muda o status da aplicação."""
    status = services.decide_document.execute(
        document_id, req.decision, actor, reason=req.reason, expected_version=req.expected_version,
    )
    return StatusResponse(id=document_id, status=status.value)

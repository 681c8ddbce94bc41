"""
FastAPI Application — Carrier Verification.

Architecture:
  - PostgreSQL (prod) / SQLite (dev) / in-memory (tests) for storage
  - Status transition engine + gating with synchronous invalidation
  - Notifications through a pluggable port (log lines by default)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.dependencies import get_services
from src.api.routes.admin import router as admin_router
from src.api.routes.applications import router as applications_router
from src.api.routes.carriers import router as carriers_router
from src.config.settings import get_settings
from src.core.entities.application import AppAction
from src.core.entities.common import Actor
from src.core.entities.document import DocDecision
from src.core.errors import (
    ConcurrencyConflict,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
    VerificationError,
)
from src.infrastructure.db.database import init_db

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Carrier Verification",
    description="Carrier onboarding, document review and marketplace gating for a freight platform.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error kind -> HTTP status
ERROR_STATUS = {
    ValidationError: 422,
    InvalidTransition: 409,
    ConcurrencyConflict: 409,
    NotFound: 404,
    PermissionDenied: 403,
}


def status_for(exc: VerificationError) -> int:
    for kind, status in ERROR_STATUS.items():
        if isinstance(exc, kind):
            return status
    return 400


@app.exception_handler(VerificationError)
async def verification_error_handler(request: Request, exc: VerificationError):
    status = status_for(exc)
    if status >= 409:
        logger.info(f"{request.method} {request.url.path} -> {status} {exc}")
    return JSONResponse(
        status_code=status,
        content={
            "detail": exc.message,
            "code": exc.code,
            "retryable": exc.retryable,
            "context": exc.context,
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies use the same error envelope as domain validation."""
    logger.info(f"{request.method} {request.url.path} -> 422 invalid request body")
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Invalid request",
            "code": ValidationError.code,
            "retryable": False,
            "context": {"errors": jsonable_encoder(exc.errors())},
        },
    )


# ── Startup ──
@app.on_event("startup")
async def startup():
    """Configure logging, create tables and optionally load demo data."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.storage_backend == "sql":
        init_db()
    if settings.load_demo_data:
        _load_demo_data()
    logger.info(f"Carrier Verification started (storage={settings.storage_backend})")


app.include_router(carriers_router, prefix="/api/v1", tags=["Carriers"])
app.include_router(applications_router, prefix="/api/v1", tags=["Applications"])
app.include_router(admin_router, prefix="/api/v1", tags=["Admin"])


# ── Health ──
@app.get("/health")
async def health():
    settings = get_settings()
    db_url = settings.database_url
    if settings.storage_backend == "memory":
        storage = "memory"
    else:
        storage = "PostgreSQL" if "postgres" in db_url else "SQLite"
    services = get_services()
    stats = services.review_queue.stats()
    return {
        "status": "ok",
        "version": "1.0.0",
        "storage": storage,
        "applications": stats["total"],
        "awaiting_review": stats["awaiting_review"],
        "gating_cache": services.gating.cache_enabled,
    }


# ── Demo Data ──
DEMO_CARRIERS = [
    {
        "carrier_id": "demo-solo-001",
        "carrier_type": "solo",
        "name": "Ravi Kumar",
        "email": "ravi.kumar@example.com",
        "documents": ["aadhaar_card", "driver_license", "permit", "registration_certificate",
                      "insurance_certificate", "fitness_certificate", "void_cheque"],
        "details": {"aadhaar_number": "4521 7788 9012", "driver_license_number": "MH12 2019 0045678",
                    "chassis_number": "MAT448012K3L21345", "license_plate_number": "MH12AB1234"},
        "submit": True,
        "decision": "approve",
    },
    {
        "carrier_id": "demo-ent-002",
        "carrier_type": "enterprise",
        "fleet_size": 24,
        "company_name": "Deccan Roadlines Pvt Ltd",
        "email": "ops@deccanroadlines.example.com",
        "documents": ["incorporation_certificate", "trade_license", "rent_agreement",
                      "pan_card", "gstin_certificate", "tan_certificate"],
        "details": {"business_registration_number": "U60231KA2015PTC081234",
                    "business_address": "42 Industrial Area, Peenya, Bengaluru",
                    "pan_number": "AACCD1234F", "fleet_size": 24},
        "submit": True,
        "decision": None,
    },
    {
        "carrier_id": "demo-ent-003",
        "carrier_type": "enterprise",
        "fleet_size": 6,
        "company_name": "Sahyadri Freight Movers",
        "email": "contact@sahyadrifreight.example.com",
        "documents": ["incorporation_certificate", "trade_license", "electricity_bill",
                      "pan_card", "gstin_certificate", "tan_certificate"],
        "details": {"business_registration_number": "U63030MH2018PTC301122",
                    "business_address": "Plot 7, MIDC Bhosari, Pune"},
        "submit": True,
        "decision": "hold",
    },
    {
        "carrier_id": "demo-solo-004",
        "carrier_type": "solo",
        "name": "Anil Yadav",
        "email": "anil.yadav@example.com",
        "documents": ["aadhaar_card", "driver_license"],
        "details": {"aadhaar_number": "7812 3345 6678"},
        "submit": False,
        "decision": None,
    },
]


def load_demo_data(services=None, demos=None) -> int:
    """Seed demo carriers through the use cases. Returns how many were created."""
    services = services or get_services()
    admin = Actor(id="demo-admin", role="admin")
    created = 0

    for demo in demos or DEMO_CARRIERS:
        carrier_id = demo["carrier_id"]
        if services.repository.get_carrier(carrier_id) is not None:
            logger.info(f"Demo carrier {carrier_id} already present, skipping")
            continue
        try:
            services.register_carrier.execute(
                carrier_type=demo["carrier_type"],
                fleet_size=demo.get("fleet_size", 1),
                name=demo.get("name", ""),
                company_name=demo.get("company_name", ""),
                email=demo.get("email", ""),
                carrier_id=carrier_id,
            )
            owner = Actor(id=carrier_id)
            application = services.start_application.execute(carrier_id, owner, details=demo.get("details"))
            for doc_type in demo["documents"]:
                services.upload_document.execute(
                    application.id, doc_type, f"demo/{carrier_id}/{doc_type}.pdf", owner,
                    file_name=f"{doc_type}.pdf",
                )
            if demo["submit"]:
                services.submit_application.execute(carrier_id, owner)
            if demo["decision"]:
                reason = "Address proof is blurry, please re-upload" if demo["decision"] == "hold" else None
                services.decide_application.execute(application.id, demo["decision"], admin, reason=reason)
            if demo["decision"] == AppAction.APPROVE.value:
                for doc in services.repository.list_documents(application.id):
                    services.decide_document.execute(doc.id, DocDecision.APPROVE, admin)
            created += 1
        except VerificationError as e:
            logger.warning(f"Failed to seed demo carrier {carrier_id}: {e}")

    logger.info(f"Loaded {created} demo carriers")
    return created


def _load_demo_data():
    try:
        load_demo_data()
    except Exception as e:
        logger.warning(f"Demo data load failed: {e}")

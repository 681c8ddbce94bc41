"""
Test helpers: deterministic clock and onboarding shortcuts.
"""

from datetime import datetime, timedelta

from src.core.entities.common import Actor

SOLO_DOCS = [
    "aadhaar_card", "driver_license", "permit", "registration_certificate",
    "insurance_certificate", "fitness_certificate", "void_cheque",
]
ENTERPRISE_DOCS = [
    "incorporation_certificate", "trade_license", "address_proof",
    "pan_card", "gstin_certificate", "tan_certificate",
]

ADMIN = Actor(id="admin-1", role="admin")


class TickingClock:
    """Every call returns one second after the previous one."""

    def __init__(self, start: datetime = datetime(2026, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


class FrozenClock:
    """Always the same instant, so insertion order is the only tiebreaker."""

    def __init__(self, at: datetime = datetime(2026, 3, 1, 9, 0, 0)):
        self.at = at

    def __call__(self) -> datetime:
        return self.at


def onboard(services, carrier_id: str, carrier_type: str = "solo", documents=None, submit: bool = False):
    """Register a carrier, open a draft and upload its documents. Returns the application."""
    services.register_carrier.execute(carrier_type=carrier_type, carrier_id=carrier_id)
    owner = Actor(id=carrier_id)
    app = services.start_application.execute(carrier_id, owner)
    if documents is None:
        documents = SOLO_DOCS if carrier_type == "solo" else ENTERPRISE_DOCS
    for doc_type in documents:
        services.upload_document.execute(app.id, doc_type, f"s3://docs/{carrier_id}/{doc_type}.pdf", owner)
    if submit:
        services.submit_application.execute(carrier_id, owner)
    return services.repository.get_application(app.id)

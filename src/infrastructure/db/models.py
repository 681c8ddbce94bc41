"""
Database Models — SQLAlchemy.

Tables:
  - carriers: Carrier identity + directory listing flag
  - verification_applications: One row per onboarding attempt
  - verification_documents: Uploaded document metadata (never deleted)
  - application_transitions: Audit trail of status transitions
"""

import uuid

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, JSON,
    ForeignKey, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from src.core.entities.application import (
    AppAction, AppStatus, StatusTransition, VerificationApplication, details_for,
)
from src.core.entities.carrier import Carrier, CarrierType
from src.core.entities.common import utcnow
from src.core.entities.document import DocStatus, DocumentRecord


class Base(DeclarativeBase):
    pass


class CarrierRow(Base):
    """Carrier identity."""
    __tablename__ = "carriers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    carrier_type = Column(String(20), nullable=True)      # legacy rows: only fleet_size
    fleet_size = Column(Integer, default=1)
    name = Column(String(120), default="")
    company_name = Column(String(200), default="")
    email = Column(String(200), default="")
    phone = Column(String(30), nullable=True)

    # Directory
    listed = Column(Boolean, default=False, index=True)
    listed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    applications = relationship("ApplicationRow", back_populates="carrier")

    def __repr__(self):
        return f"<Carrier {self.id} [{self.carrier_type or 'legacy'}] fleet={self.fleet_size}>"

    @classmethod
    def from_entity(cls, carrier: Carrier) -> "CarrierRow":
        return cls(
            id=carrier.id,
            carrier_type=carrier.carrier_type.value if carrier.carrier_type else None,
            fleet_size=carrier.fleet_size,
            name=carrier.name,
            company_name=carrier.company_name,
            email=carrier.email,
            phone=carrier.phone,
            listed=carrier.listed,
            listed_at=carrier.listed_at,
            created_at=carrier.created_at,
        )

    def to_entity(self) -> Carrier:
        return Carrier(
            id=self.id,
            carrier_type=CarrierType(self.carrier_type) if self.carrier_type else None,
            fleet_size=self.fleet_size or 1,
            name=self.name or "",
            company_name=self.company_name or "",
            email=self.email or "",
            phone=self.phone,
            listed=bool(self.listed),
            listed_at=self.listed_at,
            created_at=self.created_at,
        )


class ApplicationRow(Base):
    """One verification application (the aggregate under review)."""
    __tablename__ = "verification_applications"
    __table_args__ = (
        Index("ix_applications_carrier_created", "carrier_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    carrier_id = Column(String(36), ForeignKey("carriers.id"), nullable=False, index=True)
    carrier_type = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=AppStatus.DRAFT.value, index=True)

    # Timeline
    created_at = Column(DateTime, default=utcnow, index=True)
    submitted_at = Column(DateTime, nullable=True, index=True)
    attempt = Column(Integer, nullable=False, default=0)   # per carrier, breaks created_at ties

    # Review
    reviewed_by = Column(String(64), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    hold_notes = Column(Text, nullable=True)

    # Carrier-type specific fields (SoloDetails | EnterpriseDetails)
    details = Column(JSON, default=dict)

    # Optimistic concurrency token
    version = Column(Integer, nullable=False, default=1)

    carrier = relationship("CarrierRow", back_populates="applications")
    documents = relationship("DocumentRow", back_populates="application")

    def __repr__(self):
        return f"<Application {self.id} [{self.status}] v{self.version}>"

    @classmethod
    def from_entity(cls, app: VerificationApplication) -> "ApplicationRow":
        row = cls(id=app.id, carrier_id=app.carrier_id, created_at=app.created_at)
        row.apply(app)
        row.version = app.version
        return row

    @staticmethod
    def values_from(app: VerificationApplication) -> dict:
        """Mutable columns for an UPDATE (version handled by the repository)."""
        return {
            "carrier_type": app.carrier_type.value,
            "status": app.status.value,
            "submitted_at": app.submitted_at,
            "reviewed_by": app.reviewed_by,
            "reviewed_at": app.reviewed_at,
            "rejection_reason": app.rejection_reason,
            "hold_notes": app.hold_notes,
            "details": app.details.to_dict() if app.details else {},
        }

    def apply(self, app: VerificationApplication) -> None:
        for key, value in self.values_from(app).items():
            setattr(self, key, value)

    def to_entity(self) -> VerificationApplication:
        carrier_type = CarrierType(self.carrier_type)
        return VerificationApplication(
            id=self.id,
            carrier_id=self.carrier_id,
            carrier_type=carrier_type,
            status=AppStatus(self.status),
            details=details_for(carrier_type, self.details),
            created_at=self.created_at,
            submitted_at=self.submitted_at,
            reviewed_by=self.reviewed_by,
            reviewed_at=self.reviewed_at,
            rejection_reason=self.rejection_reason,
            hold_notes=self.hold_notes,
            version=self.version,
        )


class DocumentRow(Base):
    """Uploaded document metadata. File bytes live in object storage."""
    __tablename__ = "verification_documents"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(
        String(36), ForeignKey("verification_applications.id"), nullable=False, index=True,
    )
    document_type = Column(String(64), nullable=False, index=True)
    file_reference = Column(String(500), nullable=False)
    file_name = Column(String(255), default="")
    uploaded_at = Column(DateTime, default=utcnow, index=True)
    seq = Column(Integer, nullable=False, default=0)       # per application, breaks uploaded_at ties

    # Review
    status = Column(String(20), nullable=False, default=DocStatus.PENDING.value)
    rejection_reason = Column(Text, nullable=True)
    reviewed_by = Column(String(64), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    superseded_by = Column(String(36), nullable=True)
    version = Column(Integer, nullable=False, default=1)

    application = relationship("ApplicationRow", back_populates="documents")

    def __repr__(self):
        return f"<Document {self.id} {self.document_type} [{self.status}]>"

    @classmethod
    def from_entity(cls, doc: DocumentRecord) -> "DocumentRow":
        row = cls(
            id=doc.id,
            application_id=doc.application_id,
            document_type=doc.document_type,
            file_reference=doc.file_reference,
            file_name=doc.file_name,
            uploaded_at=doc.uploaded_at,
            version=doc.version,
        )
        row.apply(doc)
        return row

    @staticmethod
    def values_from(doc: DocumentRecord) -> dict:
        return {
            "status": doc.status.value,
            "rejection_reason": doc.rejection_reason,
            "reviewed_by": doc.reviewed_by,
            "reviewed_at": doc.reviewed_at,
            "superseded_by": doc.superseded_by,
        }

    def apply(self, doc: DocumentRecord) -> None:
        for key, value in self.values_from(doc).items():
            setattr(self, key, value)

    def to_entity(self) -> DocumentRecord:
        return DocumentRecord(
            id=self.id,
            application_id=self.application_id,
            document_type=self.document_type,
            file_reference=self.file_reference,
            file_name=self.file_name or "",
            status=DocStatus(self.status),
            rejection_reason=self.rejection_reason,
            reviewed_by=self.reviewed_by,
            reviewed_at=self.reviewed_at,
            uploaded_at=self.uploaded_at,
            superseded_by=self.superseded_by,
            version=self.version,
        )


class TransitionRow(Base):
    """Audit trail — who moved which application from where to where."""
    __tablename__ = "application_transitions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        String(36), ForeignKey("verification_applications.id"), nullable=False, index=True,
    )
    action = Column(String(20), nullable=False)
    from_status = Column(String(20), nullable=False)
    to_status = Column(String(20), nullable=False)
    actor_id = Column(String(64), nullable=False)
    note = Column(Text, nullable=True)
    occurred_at = Column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<Transition {self.application_id} {self.from_status}->{self.to_status}>"

    @classmethod
    def from_entity(cls, t: StatusTransition) -> "TransitionRow":
        return cls(
            application_id=t.application_id,
            action=t.action.value,
            from_status=t.from_status.value,
            to_status=t.to_status.value,
            actor_id=t.actor_id,
            note=t.note,
            occurred_at=t.occurred_at,
        )

    def to_entity(self) -> StatusTransition:
        return StatusTransition(
            application_id=self.application_id,
            action=AppAction(self.action),
            from_status=AppStatus(self.from_status),
            to_status=AppStatus(self.to_status),
            actor_id=self.actor_id,
            note=self.note,
            occurred_at=self.occurred_at,
        )

"""
Domain Errors

Cada classe de falha tem um `code` estável — a camada de apresentação
traduz o código em mensagem; o motor nunca tenta de novo sozinho.
"""

from typing import Any


class VerificationError(Exception):
    """Erro base do motor de verificação."""

    code = "VERIFICATION_ERROR"
    retryable = False

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(VerificationError):
    code = "VALIDATION_ERROR"


class IncompleteDocuments(ValidationError):
    """Submissão sem todos os tipos de documento exigidos."""

    code = "INCOMPLETE_DOCUMENTS"

    def __init__(self, missing: list[str], context: dict[str, Any] | None = None):
        super().__init__(
            f"Missing required documents: {', '.join(missing)}",
            context={**(context or {}), "missing": list(missing)},
        )
        self.missing = list(missing)


class InvalidTransition(VerificationError):
    code = "INVALID_TRANSITION"


class ConcurrencyConflict(VerificationError):
    """Versão desatualizada na escrita — o chamador deve reler e tentar de novo."""

    code = "CONCURRENCY_CONFLICT"
    retryable = True


class NotFound(VerificationError):
    code = "NOT_FOUND"


class PermissionDenied(VerificationError):
    code = "PERMISSION_DENIED"

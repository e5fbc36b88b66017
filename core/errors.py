"""
Errors - Taxonomía de errores del motor de registro
"""

from core.schema_models import RejectionReason


class RegistryError(Exception):
    """Error base de la plataforma."""


class ValidationRejected(RegistryError):
    """Entrada corregible por el usuario (nombre o NIK inválidos)."""

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.value)
        self.reason = reason


class EmptyRegistryExport(RegistryError):
    """Se intentó exportar un registro sin datos."""

    def __init__(self, kind: str):
        super().__init__(f"No hay registros para exportar ({kind})")
        self.kind = kind


class MalformedPersistedState(RegistryError):
    """El contenido almacenado no es un registro válido."""

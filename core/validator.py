"""
Validator - Validación de registros candidatos

Comprueba nombre y NIK antes de dar de alta un registro. Las reglas se
evalúan en orden y la primera que falla determina el motivo de rechazo.
Dirección e importe no se validan.
"""

import re
from typing import Iterable

from core.errors import ValidationRejected
from core.schema_models import Record, RejectionReason, ValidationResult
from core.utils import setup_logger

logger = setup_logger(__name__)

MIN_NAME_LENGTH = 3
NATIONAL_ID_PATTERN = re.compile(r"[0-9]{16}")


def is_valid_national_id(national_id: str) -> bool:
    """True si el NIK son exactamente 16 dígitos ASCII (sin recortar)."""
    return NATIONAL_ID_PATTERN.fullmatch(national_id) is not None


def validate_record(name: str, national_id: str,
                    existing_records: Iterable[Record]) -> ValidationResult:
    """
    Valida los campos obligatorios de un registro candidato.

    Args:
        name: Nombre tal como lo introdujo el usuario
        national_id: NIK tal como lo introdujo el usuario
        existing_records: Registros ya presentes (para la unicidad del NIK)

    Returns:
        ValidationResult con ok=True, o con el primer motivo de rechazo
    """
    trimmed_name = name.strip()

    if not trimmed_name:
        return ValidationResult.rejected(RejectionReason.NAME_REQUIRED)

    if len(trimmed_name) < MIN_NAME_LENGTH:
        return ValidationResult.rejected(RejectionReason.NAME_TOO_SHORT)

    if not is_valid_national_id(national_id):
        return ValidationResult.rejected(RejectionReason.INVALID_NATIONAL_ID)

    if any(record.national_id == national_id for record in existing_records):
        return ValidationResult.rejected(RejectionReason.DUPLICATE_NATIONAL_ID)

    return ValidationResult.accepted()


def ensure_valid_record(name: str, national_id: str,
                        existing_records: Iterable[Record]) -> None:
    """
    Igual que validate_record pero lanza ValidationRejected si falla.

    Raises:
        ValidationRejected: con el primer motivo de rechazo
    """
    result = validate_record(name, national_id, existing_records)
    if not result.ok:
        logger.warning(f"Registro rechazado: {result.reason.value}")
        raise ValidationRejected(result.reason)

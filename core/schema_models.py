"""
Schema Models - Modelos Pydantic de la plataforma

Define las estructuras de datos del registro (Record), los resultados de
validación, las notificaciones que se envían a la capa de presentación y
los modelos de configuración cargados desde YAML.
"""

import math
from enum import Enum
from typing import Optional, List, Union
from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ==============================================================================
# MODELO DE REGISTRO
# ==============================================================================

class Record(BaseModel):
    """
    Entrada del registro civil (un penduduk).

    Inmutable tras su creación: el único ciclo de vida es alta y baja.
    Los nombres de campo persistidos siguen el formato JSON histórico
    (camelCase), pero en Python se accede con snake_case.
    """
    id: int = Field(description="Identificador numérico creciente")
    name: str = Field(description="Nombre completo (nama)")
    national_id: str = Field(alias='nationalId', description="NIK de 16 dígitos")
    address: str = Field("", description="Dirección (alamat), puede estar vacía")
    amount: Optional[Union[int, float]] = Field(
        None, description="Importe entero; NaN si la entrada no tenía dígitos"
    )
    created_at: str = Field(alias='createdAt', description="Fecha de alta formateada (id-ID)")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_serializer('amount')
    def _serialize_amount(self, value: Optional[Union[int, float]]) -> Optional[Union[int, float]]:
        # JSON no admite NaN: se guarda como null
        if isinstance(value, float) and math.isnan(value):
            return None
        return value

    def to_storage_dict(self) -> dict:
        """Representación JSON persistible (claves camelCase)."""
        return self.model_dump(by_alias=True)


# ==============================================================================
# NOTIFICACIONES
# ==============================================================================

class NotificationType(str, Enum):
    """Severidad visual de una notificación."""
    SUCCESS = "success"
    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"


class EngineEvent(str, Enum):
    """Eventos que el motor emite hacia la capa de presentación."""
    RECORD_CREATED = "record-created"
    RECORD_DELETED = "record-deleted"
    REGISTRY_CLEARED = "registry-cleared"
    EXPORT_SUCCEEDED = "export-succeeded"
    EXPORT_FAILED = "export-failed"
    VALIDATION_REJECTED = "validation-rejected"


class Notification(BaseModel):
    """Mensaje transitorio para el usuario."""
    type: NotificationType = Field(NotificationType.INFO, description="Severidad")
    message: str = Field(description="Texto a mostrar")
    event: EngineEvent = Field(description="Evento que originó el mensaje")
    reason: Optional[str] = Field(None, description="Motivo de rechazo, si aplica")

    model_config = ConfigDict(frozen=True)


# ==============================================================================
# VALIDACIÓN
# ==============================================================================

class RejectionReason(str, Enum):
    """Motivos de rechazo, en el orden en que se comprueban."""
    NAME_REQUIRED = "name required"
    NAME_TOO_SHORT = "name too short"
    INVALID_NATIONAL_ID = "invalid national id format"
    DUPLICATE_NATIONAL_ID = "duplicate national id"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self][0]

    @property
    def severity(self) -> NotificationType:
        return _REJECTION_MESSAGES[self][1]


_REJECTION_MESSAGES = {
    RejectionReason.NAME_REQUIRED: ("❌ Nama tidak boleh kosong!", NotificationType.DANGER),
    RejectionReason.NAME_TOO_SHORT: ("❌ Nama minimal 3 karakter!", NotificationType.DANGER),
    RejectionReason.INVALID_NATIONAL_ID: ("❌ NIK harus 16 digit angka!", NotificationType.DANGER),
    RejectionReason.DUPLICATE_NATIONAL_ID: ("⚠️ NIK sudah terdaftar!", NotificationType.WARNING),
}


class ValidationResult(BaseModel):
    """Resultado de validar un registro candidato: Ok o Rejected(reason)."""
    ok: bool = Field(description="True si el registro es aceptable")
    reason: Optional[RejectionReason] = Field(None, description="Primer motivo de rechazo")

    @classmethod
    def accepted(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "ValidationResult":
        return cls(ok=False, reason=reason)


# ==============================================================================
# MODELOS DE CONFIGURACIÓN
# ==============================================================================

class AppSettings(BaseModel):
    """Configuración general de la aplicación (config/settings.yaml)."""
    storage_dir: str = Field("data", description="Directorio del almacenamiento JSON")
    storage_key: str = Field("dataRegistry", description="Clave bajo la que se guarda el registro")
    output_dir: str = Field("outputs", description="Directorio de los ficheros exportados")
    log_level: str = Field("INFO", description="Nivel de logging")


class ReportColumn(BaseModel):
    """Definición de una columna del informe."""
    id: str = Field(description="Identificador de la columna")
    label: str = Field(description="Cabecera visible (clave de la hoja de cálculo)")
    width: int = Field(description="Ancho en caracteres para la hoja de cálculo")
    align: str = Field("left", description="Alineación en las exportaciones HTML")
    escape: bool = Field(False, description="Escapar el valor en las exportaciones HTML")
    bold: bool = Field(False, description="Valor en negrita en las exportaciones HTML")


def _default_columns() -> List[ReportColumn]:
    return [
        ReportColumn(id="no", label="No", width=5, align="center", bold=True),
        ReportColumn(id="name", label="Nama", width=25, escape=True),
        ReportColumn(id="national_id", label="NIK", width=18, align="center", bold=True),
        ReportColumn(id="address", label="Alamat", width=30, escape=True),
        ReportColumn(id="amount", label="Nominal (Rp)", width=15, align="right"),
        ReportColumn(id="created_at", label="Tanggal Input", width=20),
    ]


class PdfOptions(BaseModel):
    """Opciones de página y rasterizado del PDF."""
    page_format: str = Field("a4", description="Formato de página")
    orientation: str = Field("portrait", description="Orientación")
    margin_mm: float = Field(10, description="Márgenes en milímetros")
    raster_scale: float = Field(2, description="Factor de escala del rasterizado")
    image_quality: float = Field(0.98, ge=0, le=1, description="Calidad JPEG (0-1)")


class ReportSettings(BaseModel):
    """Configuración del informe (reports/<plugin>/config/report.yaml)."""
    title: str = Field("📋 Laporan Data Penduduk", description="Título del informe")
    document_title: str = Field("Data Penduduk", description="Título del documento HTML")
    sheet_name: str = Field("Data Penduduk", description="Nombre de la hoja de cálculo")
    filename_prefix: str = Field("Data_Penduduk", description="Prefijo de los ficheros exportados")
    columns: List[ReportColumn] = Field(default_factory=_default_columns)
    pdf: PdfOptions = Field(default_factory=PdfOptions)

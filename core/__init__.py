"""
Core - Núcleo de la plataforma

Este módulo contiene la funcionalidad reutilizable del registro, independiente
del informe concreto que se genere a partir de él.

Módulos:
    - config_loader: Carga de configuración YAML
    - schema_models: Modelos Pydantic de datos y configuración
    - errors: Taxonomía de errores
    - storage: Almacenamiento clave/valor (fichero o memoria)
    - validator: Validación de registros candidatos
    - registry: Registro persistente (alta, baja, búsqueda)
    - formatting: Formateo de moneda, fechas y markup
    - notifications: Canal de notificaciones hacia la UI
    - excel_engine / pdf_engine / word_engine: Escritura de ficheros
    - utils: Utilidades generales
"""

from .config_loader import load_settings, load_report_settings
from .schema_models import Record, Notification, ValidationResult
from .registry import Registry

__all__ = [
    "load_settings",
    "load_report_settings",
    "Record",
    "Notification",
    "ValidationResult",
    "Registry",
]

"""
Registro de Data Penduduk

Sistema para mantener un registro persistente de datos de penduduk y
generar informes en Excel, PDF y Word a partir de plantillas y
configuraciones YAML.

Versión: 1.0.0 (20261019)
"""

__version__ = "1.0.0"
__release_date__ = "20261019"

# Exportar componentes principales del core
from core.config_loader import load_settings, load_report_settings
from core.schema_models import Record, Notification
from core.registry import Registry

__all__ = [
    "load_settings",
    "load_report_settings",
    "Record",
    "Notification",
    "Registry",
]

"""
Config Loader - Carga de configuración desde YAML

Funciones para cargar y validar los archivos YAML de configuración de la
aplicación y de los informes.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic import ValidationError

from core.utils import setup_logger, get_project_root
from core.schema_models import AppSettings, ReportSettings

logger = setup_logger(__name__)


# ==============================================================================
# CARGA DE ARCHIVOS YAML GENÉRICOS
# ==============================================================================

def load_yaml_config(filepath: Path) -> Optional[Dict[str, Any]]:
    """
    Carga un archivo YAML genérico.

    Args:
        filepath: Path al archivo YAML

    Returns:
        Diccionario con el contenido o None si hay error
    """
    if not filepath.exists():
        logger.warning(f"Archivo no encontrado: {filepath}")
        return None

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        logger.debug(f"YAML cargado: {filepath.name}")
        return data

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error cargando YAML {filepath}: {e}")
        return None


# ==============================================================================
# CONFIGURACIÓN DE LA APLICACIÓN
# ==============================================================================

def get_default_settings_path() -> Path:
    """Path por defecto de config/settings.yaml."""
    return get_project_root() / "config" / "settings.yaml"


def load_settings(filepath: Optional[Path] = None) -> AppSettings:
    """
    Carga la configuración general de la aplicación.

    Si el archivo no existe o no es válido se usan los valores por defecto.

    Args:
        filepath: Path al YAML (por defecto config/settings.yaml)

    Returns:
        AppSettings validado
    """
    filepath = filepath or get_default_settings_path()
    data = load_yaml_config(filepath)

    if not data or 'app' not in data:
        logger.info("Usando configuración de aplicación por defecto")
        return AppSettings()

    try:
        settings = AppSettings(**data['app'])
        logger.info(f"Configuración cargada desde {filepath.name}")
        return settings
    except ValidationError as e:
        logger.warning(f"Configuración inválida en {filepath}, se usan valores por defecto: {e}")
        return AppSettings()


# ==============================================================================
# CONFIGURACIÓN DE INFORMES
# ==============================================================================

def load_report_settings(config_dir: Path) -> ReportSettings:
    """
    Carga la configuración de un informe (report.yaml).

    Args:
        config_dir: Directorio de configuración del plugin

    Returns:
        ReportSettings validado (o por defecto si falta o es inválido)
    """
    filepath = config_dir / "report.yaml"
    data = load_yaml_config(filepath)

    if not data:
        logger.info("Usando configuración de informe por defecto")
        return ReportSettings()

    section = dict(data.get('report') or {})
    if 'columns' in data:
        section['columns'] = data['columns']
    if 'pdf' in data:
        section['pdf'] = data['pdf']

    try:
        settings = ReportSettings(**section)
        logger.info(f"Configuración de informe cargada: {settings.document_title} "
                    f"({len(settings.columns)} columnas)")
        return settings
    except ValidationError as e:
        logger.warning(f"Configuración de informe inválida en {filepath}: {e}")
        return ReportSettings()

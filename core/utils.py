"""
Utils - Utilidades generales de la plataforma

Funciones auxiliares para logging, manejo de paths y otras operaciones comunes.
"""

import logging
from pathlib import Path
import sys


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura y devuelve un logger con formato estándar.

    Args:
        name: Nombre del logger
        level: Nivel de logging (default: INFO)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)

    # Evitar duplicar handlers si ya existe
    if logger.handlers:
        return logger

    logger.setLevel(level)

    # Handler para consola
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Formato del log
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


def set_log_level(level_name: str) -> None:
    """
    Ajusta el nivel de todos los loggers de la plataforma ya creados.

    Args:
        level_name: Nombre del nivel ("DEBUG", "INFO", "WARNING"...)
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    for name in list(logging.root.manager.loggerDict):
        if name.split('.')[0] in ('core', 'reports', 'ui'):
            logger = logging.getLogger(name)
            logger.setLevel(level)
            for handler in logger.handlers:
                handler.setLevel(level)


def get_project_root() -> Path:
    """
    Obtiene el directorio raíz del proyecto.

    Returns:
        Path al directorio raíz (donde están core/, reports/ y ui/)
    """
    # Desde este archivo (core/utils.py), subir un nivel
    return Path(__file__).resolve().parent.parent


def safe_filename(filename: str) -> str:
    """
    Convierte un string en un nombre de archivo seguro.

    Args:
        filename: Nombre de archivo original

    Returns:
        Nombre de archivo sanitizado
    """
    # Reemplazar caracteres problemáticos
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '_')

    # Limitar longitud
    if len(filename) > 200:
        filename = filename[:200]

    return filename.strip()


def ensure_directory(directory: Path) -> Path:
    """
    Asegura que un directorio existe, creándolo si es necesario.

    Los errores del sistema de archivos se propagan al llamador.

    Args:
        directory: Path al directorio

    Returns:
        El mismo path, ya existente
    """
    directory.mkdir(parents=True, exist_ok=True)
    return directory

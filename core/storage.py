"""
Storage - Almacenamiento clave/valor para el registro persistido

El registro se guarda como un único documento JSON bajo una clave fija.
FileStorage guarda cada clave en un fichero <clave>.json dentro de un
directorio; MemoryStorage se usa en tests y sesiones efímeras.

Los errores de E/S no se capturan: se propagan al llamador.
"""

from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from core.utils import setup_logger, safe_filename

logger = setup_logger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Interfaz mínima de almacenamiento (get/set/remove por clave)."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...


class FileStorage:
    """Almacenamiento en disco: un fichero JSON por clave."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{safe_filename(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            logger.debug(f"Clave '{key}' sin contenido en {self.directory}")
            return None

        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)

        # Escribir primero a un temporal para no dejar el fichero a medias
        tmp_path = path.with_suffix('.json.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()


class MemoryStorage:
    """Almacenamiento en memoria con la misma interfaz que FileStorage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

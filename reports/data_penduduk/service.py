"""
Service - Fachada del motor para la capa de presentación

Une registro, validador y exportador, y traduce cada operación en una
notificación (record-created, record-deleted, registry-cleared,
export-succeeded, export-failed, validation-rejected).

Se construye una vez por sesión (con sus propias notificaciones) y puede
compartir el Registry con otras sesiones; no hay estado global.
"""

from pathlib import Path
from typing import Any, Callable, List, Optional

from core.config_loader import load_settings
from core.errors import ValidationRejected
from core.notifications import Listener, NotificationCenter
from core.registry import Registry
from core.schema_models import AppSettings, EngineEvent, NotificationType, Record
from core.storage import FileStorage, KeyValueStorage
from core.utils import setup_logger, get_project_root
from core.validator import ensure_valid_record
from reports.data_penduduk.exporter import ExportCoordinator

logger = setup_logger(__name__)


def _resolve_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else get_project_root() / path


class RegistryService:
    """Operaciones que expone el motor: alta, baja, borrado, búsqueda y exportación."""

    def __init__(self, registry: Registry, exporter: Optional[ExportCoordinator] = None,
                 notifications: Optional[NotificationCenter] = None,
                 output_dir: Optional[Path] = None):
        self.registry = registry
        self.notifications = notifications or NotificationCenter()
        self.exporter = exporter or ExportCoordinator(
            registry,
            output_dir or get_project_root() / "outputs",
            notifications=self.notifications,
        )

    @staticmethod
    def build_registry(settings: AppSettings,
                       storage: Optional[KeyValueStorage] = None) -> Registry:
        """
        Construye el registro descrito por la configuración.

        Pensado para crearse una vez por proceso y compartirse entre
        sesiones (cada sesión con su propio servicio y notificaciones).
        """
        storage_dir = _resolve_path(settings.storage_dir)
        return Registry(storage or FileStorage(storage_dir), settings.storage_key)

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None,
                      storage: Optional[KeyValueStorage] = None,
                      registry: Optional[Registry] = None) -> "RegistryService":
        """
        Construye el servicio a partir de la configuración de la aplicación.

        Los directorios relativos se resuelven desde la raíz del proyecto.

        Args:
            settings: Configuración (por defecto config/settings.yaml)
            storage: Backend del registro si no se pasa registry
            registry: Registro ya construido y compartido

        Returns:
            RegistryService con su propio NotificationCenter
        """
        settings = settings or load_settings()
        if registry is None:
            registry = cls.build_registry(settings, storage)
        return cls(registry, output_dir=_resolve_path(settings.output_dir))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.notifications.subscribe(listener)

    # --------------------------------------------------------------------------
    # Mutaciones
    # --------------------------------------------------------------------------

    def add_record(self, name: str, national_id: str, address: str,
                   amount: Any) -> Optional[Record]:
        """
        Valida y da de alta un registro.

        Returns:
            El Record creado, o None si la validación lo rechazó
        """
        try:
            ensure_valid_record(name, national_id, self.registry.list())
            # El registro repite la comprobación de unicidad bajo su lock
            record = self.registry.add(name, national_id, address, amount)
        except ValidationRejected as e:
            self.notifications.notify(
                EngineEvent.VALIDATION_REJECTED,
                e.reason.message,
                e.reason.severity,
                reason=e.reason.value,
            )
            return None

        self.notifications.notify(
            EngineEvent.RECORD_CREATED, "✓ Data berhasil ditambahkan!", NotificationType.SUCCESS
        )
        return record

    def delete_record(self, record_id: int) -> None:
        """Elimina un registro (ya confirmado por el usuario)."""
        self.registry.delete(record_id)
        self.notifications.notify(
            EngineEvent.RECORD_DELETED, "Data berhasil dihapus!", NotificationType.SUCCESS
        )

    def delete_all(self) -> None:
        """Vacía el registro (ya confirmado por el usuario). Irreversible."""
        self.registry.delete_all()
        self.notifications.notify(
            EngineEvent.REGISTRY_CLEARED, "Semua data berhasil dihapus!", NotificationType.WARNING
        )

    # --------------------------------------------------------------------------
    # Consultas
    # --------------------------------------------------------------------------

    def records(self) -> List[Record]:
        return self.registry.list()

    def search(self, query: str) -> List[Record]:
        return self.registry.search(query)

    def get_record(self, record_id: int) -> Optional[Record]:
        """Registro con ese id (para el aviso de confirmación), o None."""
        return self.registry.get(record_id)

    # --------------------------------------------------------------------------
    # Exportaciones
    # --------------------------------------------------------------------------

    def export_excel(self) -> Optional[Path]:
        return self.exporter.export_excel()

    async def export_pdf(self) -> Optional[Path]:
        return await self.exporter.export_pdf()

    def export_word(self) -> Optional[Path]:
        return self.exporter.export_word()

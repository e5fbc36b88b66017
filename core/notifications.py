"""
Notifications - Canal de notificaciones hacia la capa de presentación

El motor no pinta nada: publica Notification y la UI decide cómo mostrarlas.
"""

from typing import Callable, List, Optional

from core.schema_models import EngineEvent, Notification, NotificationType
from core.utils import setup_logger

logger = setup_logger(__name__)

Listener = Callable[[Notification], None]


class NotificationCenter:
    """Despacha notificaciones a los listeners suscritos y guarda la última."""

    def __init__(self):
        self._listeners: List[Listener] = []
        self.last: Optional[Notification] = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Suscribe un listener.

        Returns:
            Función que cancela la suscripción
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, notification: Notification) -> Notification:
        self.last = notification
        logger.debug(f"Notificación [{notification.type.value}] {notification.event.value}: "
                     f"{notification.message}")
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def notify(self, event: EngineEvent, message: str,
               type: NotificationType = NotificationType.INFO,
               reason: Optional[str] = None) -> Notification:
        return self.publish(Notification(type=type, message=message, event=event, reason=reason))

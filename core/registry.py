"""
Registry - Registro persistente de datos de penduduk

Este módulo mantiene la colección ordenada de registros (más reciente
primero), la persiste como un array JSON bajo una clave fija y ofrece
alta, baja, borrado total y búsqueda.

La validación de nombre y NIK es responsabilidad del llamador
(core.validator) antes de invocar add(); add() solo vuelve a comprobar la
unicidad del NIK, ya dentro del bloqueo.

Varias instancias pueden compartir el mismo almacenamiento (una por
proceso, o por sesión): antes de cada operación se comprueba si el
documento persistido cambió desde la última lectura o escritura propia y,
si es así, se recarga. Las mutaciones se serializan con un lock.
"""

import json
import re
import threading
import time
from datetime import datetime
from typing import Any, Callable, List, Optional, Union

from pydantic import ValidationError

from core.errors import MalformedPersistedState, ValidationRejected
from core.formatting import timestamp_now
from core.schema_models import Record, RejectionReason
from core.storage import KeyValueStorage
from core.utils import setup_logger

logger = setup_logger(__name__)

DEFAULT_STORAGE_KEY = "dataRegistry"

_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)")


# ==============================================================================
# UTILIDADES
# ==============================================================================

def parse_amount(raw: Any) -> Union[int, float]:
    """
    Convierte la entrada del importe a entero leyendo los dígitos iniciales.

    Se ignoran los espacios iniciales, se admite un signo y se descarta todo
    lo que sigue a los dígitos (decimales incluidos). Si no hay dígitos
    devuelve NaN, que se acepta y llega tal cual al formateo.

    Ejemplo:
        >>> parse_amount("5000000.75")
        5000000
        >>> parse_amount("abc")
        nan
    """
    if raw is None:
        return float('nan')

    match = _LEADING_INT.match(str(raw))
    if not match:
        return float('nan')

    sign, digits = match.groups()
    value = int(digits)
    return -value if sign == '-' else value


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def decode_records(payload: str) -> List[Record]:
    """
    Deserializa el array JSON persistido.

    Raises:
        MalformedPersistedState: si el JSON es inválido o algún elemento
            no tiene la forma de un Record
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedPersistedState(f"JSON inválido: {e}") from e

    if not isinstance(data, list):
        raise MalformedPersistedState("Se esperaba un array de registros")

    try:
        return [Record.model_validate(item) for item in data]
    except ValidationError as e:
        raise MalformedPersistedState(f"Registro con formato inválido: {e}") from e


def encode_records(records: List[Record]) -> str:
    """Serializa los registros como array JSON (claves camelCase)."""
    return json.dumps([record.to_storage_dict() for record in records], ensure_ascii=False)


# ==============================================================================
# REGISTRO
# ==============================================================================

class Registry:
    """
    Propietario de la secuencia de registros y de su copia persistida.

    Los consumidores reciben siempre listas nuevas de registros inmutables,
    nunca la lista interna.
    """

    def __init__(self, storage: KeyValueStorage, storage_key: str = DEFAULT_STORAGE_KEY,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            storage: Backend clave/valor donde se guarda el registro
            storage_key: Clave del documento JSON
            clock: Reloj usado para la fecha de alta (inyectable en tests)
        """
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock
        self._lock = threading.RLock()
        self._last_payload: Optional[str] = None
        self._records: List[Record] = self.load()

    # --------------------------------------------------------------------------
    # Persistencia
    # --------------------------------------------------------------------------

    def load(self) -> List[Record]:
        """
        Carga el registro persistido.

        Si no existe o está corrupto se empieza con un registro vacío
        (se acepta la pérdida de datos antes que bloquear el arranque).
        """
        payload = self._storage.get_item(self._storage_key)
        self._last_payload = payload
        if payload is None:
            logger.info("No se encontró registro persistido, se inicia vacío")
            return []

        try:
            records = decode_records(payload)
        except MalformedPersistedState as e:
            logger.warning(f"Registro persistido corrupto, se inicia vacío: {e}")
            return []

        logger.info(f"Cargados {len(records)} registros")
        return records

    def _sync(self) -> None:
        # Otra instancia escribió en el mismo almacenamiento
        if self._storage.get_item(self._storage_key) != self._last_payload:
            logger.info("El registro persistido cambió, se recarga")
            self._records = self.load()

    def _persist(self, records: List[Record]) -> None:
        # La secuencia en memoria solo cambia si la escritura tuvo éxito
        payload = encode_records(records)
        self._storage.set_item(self._storage_key, payload)
        self._records = records
        self._last_payload = payload

    # --------------------------------------------------------------------------
    # Operaciones
    # --------------------------------------------------------------------------

    def _next_id(self) -> int:
        candidate = _now_millis()
        if self._records:
            highest = max(record.id for record in self._records)
            if candidate <= highest:
                candidate = highest + 1
        return candidate

    def add(self, name: str, national_id: str, address: str, amount: Any) -> Record:
        """
        Da de alta un registro ya validado y lo inserta al principio.

        Args:
            name: Nombre (se recorta)
            national_id: NIK (se recorta)
            address: Dirección (se recorta)
            amount: Importe tal como se introdujo (ver parse_amount)

        Returns:
            El Record canónico creado

        Raises:
            ValidationRejected: si el NIK ya está en el registro persistido
        """
        with self._lock:
            self._sync()

            national_id = national_id.strip()
            if any(record.national_id == national_id for record in self._records):
                logger.warning(f"NIK duplicado detectado al persistir: {national_id}")
                raise ValidationRejected(RejectionReason.DUPLICATE_NATIONAL_ID)

            record = Record(
                id=self._next_id(),
                name=name.strip(),
                national_id=national_id,
                address=(address or '').strip(),
                amount=parse_amount(amount),
                created_at=timestamp_now(self._clock()),
            )

            self._persist([record] + self._records)

        logger.info(f"Registro añadido: {record.id} ({record.national_id})")
        return record

    def delete(self, record_id: int) -> bool:
        """
        Elimina el primer registro con ese id.

        Si no existe no es un error: la secuencia queda igual. Siempre
        persiste.

        Returns:
            True si se eliminó algún registro
        """
        with self._lock:
            self._sync()

            records = list(self._records)
            removed = False
            for index, record in enumerate(records):
                if record.id == record_id:
                    del records[index]
                    removed = True
                    break

            self._persist(records)

        if removed:
            logger.info(f"Registro eliminado: {record_id}")
        else:
            logger.warning(f"No se encontró registro con id {record_id}")
        return removed

    def delete_all(self) -> None:
        """Vacía el registro y persiste la secuencia vacía. Irreversible."""
        with self._lock:
            count = len(self._records)
            self._persist([])
        logger.info(f"Registro vaciado ({count} registros eliminados)")

    def search(self, query: str) -> List[Record]:
        """
        Filtra registros por nombre, NIK o dirección.

        Nombre y dirección se comparan sin distinguir mayúsculas; el NIK se
        compara con la consulta tal cual, sin recortar. Una consulta vacía o
        solo con espacios devuelve todo el registro. El orden es el del
        registro (más reciente primero).
        """
        records = self.list()
        if not query.strip():
            return records

        lower_query = query.lower()
        results = [
            record for record in records
            if lower_query in record.name.lower()
            or query in record.national_id
            or lower_query in record.address.lower()
        ]

        logger.debug(f"Búsqueda '{query}': {len(results)} resultados")
        return results

    def list(self) -> List[Record]:
        """Copia de la secuencia completa."""
        with self._lock:
            self._sync()
            return list(self._records)

    def get(self, record_id: int) -> Optional[Record]:
        """Registro con ese id, o None."""
        return next((r for r in self.list() if r.id == record_id), None)

    def __len__(self) -> int:
        return len(self.list())

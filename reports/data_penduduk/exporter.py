"""
Exporter - Coordinación de las exportaciones del informe

Para cada formato: comprueba que haya datos, construye la representación
con el generador del informe, la entrega al motor de salida (sink) con el
nombre Data_Penduduk_<YYYYMMDD_HHMM>.<ext> y notifica el resultado.

El PDF es asíncrono: el éxito solo se notifica cuando el rasterizado ha
terminado. No hay cancelación ni reintentos.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.errors import EmptyRegistryExport
from core.excel_engine import write_workbook
from core.formatting import file_timestamp
from core.notifications import NotificationCenter
from core.pdf_engine import write_pdf
from core.registry import Registry
from core.schema_models import EngineEvent, NotificationType, PdfOptions, ReportColumn, ReportSettings
from core.utils import setup_logger
from core.word_engine import write_word_document
from reports.data_penduduk.logic import (
    ReportContext,
    build_report_context,
    build_sheet_rows,
    get_report_settings,
    render_doc_html,
    render_pdf_html,
)

logger = setup_logger(__name__)

ExcelSink = Callable[[List[Dict[str, Any]], List[ReportColumn], str, Path], Path]
PdfSink = Callable[[str, Path, PdfOptions], Awaitable[Path]]
DocSink = Callable[[str, Path], Path]

EMPTY_EXPORT_MESSAGE = "❌ Tidak ada data untuk diunduh!"

# Etiqueta visible de cada formato y extensión del fichero
EXPORT_KINDS = {
    'excel': ('Excel', 'xlsx'),
    'pdf': ('PDF', 'pdf'),
    'word': ('Word', 'doc'),
}


class ExportCoordinator:
    """Orquesta registro → generador del informe → sink → notificación."""

    def __init__(self, registry: Registry, output_dir: Path,
                 notifications: Optional[NotificationCenter] = None,
                 settings: Optional[ReportSettings] = None,
                 excel_sink: ExcelSink = write_workbook,
                 pdf_sink: PdfSink = write_pdf,
                 doc_sink: DocSink = write_word_document,
                 clock: Callable[[], datetime] = datetime.now):
        self.registry = registry
        self.output_dir = Path(output_dir)
        self.notifications = notifications or NotificationCenter()
        self.settings = settings or get_report_settings()
        self._excel_sink = excel_sink
        self._pdf_sink = pdf_sink
        self._doc_sink = doc_sink
        self._clock = clock

    # --------------------------------------------------------------------------
    # Helpers
    # --------------------------------------------------------------------------

    def output_path(self, kind: str) -> Path:
        """
        Path del fichero a generar para ese formato.

        El nombre tiene resolución de minutos: si ya existe un fichero con
        ese nombre se añade un sufijo " (1)", " (2)", ... en lugar de
        sobrescribirlo.
        """
        extension = EXPORT_KINDS[kind][1]
        stem = f"{self.settings.filename_prefix}_{file_timestamp(self._clock())}"

        path = self.output_dir / f"{stem}.{extension}"
        counter = 1
        while path.exists():
            path = self.output_dir / f"{stem} ({counter}).{extension}"
            counter += 1
        return path

    def _prepare(self, kind: str) -> ReportContext:
        records = self.registry.list()
        if not records:
            raise EmptyRegistryExport(kind)
        return build_report_context(records, self.settings)

    def _succeeded(self, kind: str, path: Path) -> Path:
        label = EXPORT_KINDS[kind][0]
        logger.info(f"Exportación {label} completada: {path.name}")
        self.notifications.notify(
            EngineEvent.EXPORT_SUCCEEDED,
            f"✓ Berhasil mengunduh file {label}!",
            NotificationType.SUCCESS,
        )
        return path

    def _empty(self, error: EmptyRegistryExport) -> None:
        logger.warning(str(error))
        self.notifications.notify(
            EngineEvent.EXPORT_FAILED, EMPTY_EXPORT_MESSAGE, NotificationType.DANGER
        )

    def _failed(self, kind: str, error: Exception) -> None:
        label = EXPORT_KINDS[kind][0]
        logger.error(f"Error generando exportación {label}: {error}")
        self.notifications.notify(
            EngineEvent.EXPORT_FAILED,
            f"❌ Gagal membuat file {label}!",
            NotificationType.DANGER,
        )

    # --------------------------------------------------------------------------
    # Exportaciones
    # --------------------------------------------------------------------------

    def export_excel(self) -> Optional[Path]:
        """Exporta el registro a .xlsx. Devuelve el path o None si falla."""
        try:
            context = self._prepare('excel')
        except EmptyRegistryExport as e:
            self._empty(e)
            return None

        try:
            path = self._excel_sink(
                build_sheet_rows(context),
                context.columns,
                self.settings.sheet_name,
                self.output_path('excel'),
            )
        except Exception as e:
            self._failed('excel', e)
            return None

        return self._succeeded('excel', path)

    async def export_pdf(self) -> Optional[Path]:
        """Exporta el registro a .pdf, esperando al rasterizado."""
        try:
            context = self._prepare('pdf')
        except EmptyRegistryExport as e:
            self._empty(e)
            return None

        try:
            path = await self._pdf_sink(
                render_pdf_html(context),
                self.output_path('pdf'),
                self.settings.pdf,
            )
        except Exception as e:
            self._failed('pdf', e)
            return None

        return self._succeeded('pdf', path)

    def export_word(self) -> Optional[Path]:
        """Exporta el registro a .doc (HTML compatible con Word)."""
        try:
            context = self._prepare('word')
        except EmptyRegistryExport as e:
            self._empty(e)
            return None

        try:
            path = self._doc_sink(render_doc_html(context), self.output_path('word'))
        except Exception as e:
            self._failed('word', e)
            return None

        return self._succeeded('word', path)

"""
================================================================================
LOGIC.PY - Generador del informe "Laporan Data Penduduk"
================================================================================

Construye el contenido tabular del informe a partir de la lista de
registros y lo entrega en tres representaciones equivalentes:

- Hoja de cálculo: lista de filas (diccionarios) con cabeceras fijas
- PDF: fragmento HTML con cabecera y tabla, para rasterizar
- Word: documento HTML completo con namespaces de Office

Las filas se construyen una sola vez (build_report_context) y cada
formato las renderiza con su propia plantilla Jinja2, de modo que el
total y los valores por fila son idénticos en las tres salidas.

Uso:
    from reports.data_penduduk.logic import build_report_context, render_pdf_html

    context = build_report_context(registry.list(), settings)
    html = render_pdf_html(context)
================================================================================
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from pydantic import BaseModel, Field

from core.config_loader import load_report_settings
from core.formatting import currency, escape_markup, timestamp_now
from core.schema_models import Record, ReportColumn, ReportSettings
from core.utils import setup_logger

logger = setup_logger(__name__)

PLUGIN_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = PLUGIN_DIR / "templates"
CONFIG_DIR = PLUGIN_DIR / "config"

PDF_TEMPLATE = "pdf_report.html.j2"
DOC_TEMPLATE = "doc_report.html.j2"


# ==============================================================================
# MODELOS
# ==============================================================================

class ReportRow(NamedTuple):
    """Una fila del informe, en el orden de las columnas. Sin escapar."""
    no: int
    name: str
    national_id: str
    address: str
    amount: str
    created_at: str


class ReportContext(BaseModel):
    """Todo lo necesario para renderizar cualquiera de los tres formatos."""
    title: str
    document_title: str
    generated_at: str
    total: int
    columns: List[ReportColumn]
    rows: List[ReportRow] = Field(default_factory=list)


# ==============================================================================
# CONFIGURACIÓN Y PLANTILLAS
# ==============================================================================

@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """Configuración del informe (config/report.yaml), cacheada."""
    return load_report_settings(CONFIG_DIR)


@lru_cache(maxsize=1)
def get_template_environment() -> Environment:
    """
    Entorno Jinja2 de las plantillas del informe.

    El autoescape está desactivado: las celdas se generan con el filtro
    cell, que escapa solo las columnas marcadas (nombre y dirección).
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters['cell'] = format_cell
    return env


def format_cell(row: ReportRow, column: ReportColumn) -> str:
    """
    Contenido HTML de una celda según la definición de su columna.

    Args:
        row: Fila del informe
        column: Columna (id, escape y negrita)

    Returns:
        Valor como texto, escapado y/o en negrita si la columna lo indica
    """
    value = str(getattr(row, column.id))
    if column.escape:
        value = escape_markup(value)
    if column.bold:
        value = f"<strong>{value}</strong>"
    return value


# ==============================================================================
# CONSTRUCCIÓN DE FILAS
# ==============================================================================

def build_report_rows(records: Iterable[Record]) -> List[ReportRow]:
    """
    Convierte los registros en filas del informe.

    El número de fila se deriva de la posición actual (1, 2, ...), nunca
    del id almacenado.
    """
    return [
        ReportRow(
            no=position,
            name=record.name,
            national_id=record.national_id,
            address=record.address,
            amount=currency(record.amount),
            created_at=record.created_at,
        )
        for position, record in enumerate(records, start=1)
    ]


def build_report_context(records: Iterable[Record],
                         settings: Optional[ReportSettings] = None,
                         generated_at: Optional[str] = None) -> ReportContext:
    """
    Construye el contexto común a los tres formatos.

    Args:
        records: Registros en el orden del registro (más reciente primero)
        settings: Configuración del informe (por defecto la del plugin)
        generated_at: Marca "Dicetak pada" (por defecto, ahora)

    Returns:
        ReportContext con cabecera, columnas y filas
    """
    settings = settings or get_report_settings()
    unknown = [column.id for column in settings.columns if column.id not in ReportRow._fields]
    if unknown:
        raise ValueError(f"Columnas desconocidas en la configuración del informe: {unknown}")

    rows = build_report_rows(records)

    context = ReportContext(
        title=settings.title,
        document_title=settings.document_title,
        generated_at=generated_at or timestamp_now(),
        total=len(rows),
        columns=settings.columns,
        rows=rows,
    )
    logger.info(f"Contexto del informe construido con {context.total} filas")
    return context


# ==============================================================================
# REPRESENTACIONES
# ==============================================================================

def build_sheet_rows(context: ReportContext) -> List[Dict[str, Any]]:
    """
    Filas para la hoja de cálculo: {cabecera: valor} en orden de columnas.

    Las celdas no son markup, así que no se escapa nada.
    """
    return [
        {column.label: getattr(row, column.id) for column in context.columns}
        for row in context.rows
    ]


def render_pdf_html(context: ReportContext) -> str:
    """Fragmento HTML (cabecera + tabla) que se rasteriza a PDF."""
    template = get_template_environment().get_template(PDF_TEMPLATE)
    return template.render(report=context)


def render_doc_html(context: ReportContext) -> str:
    """Documento HTML completo compatible con Word (.doc)."""
    template = get_template_environment().get_template(DOC_TEMPLATE)
    return template.render(report=context)

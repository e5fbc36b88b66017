"""
Plugin: Laporan Data Penduduk

Registro de datos de penduduk (nombre, NIK, dirección, importe y fecha de
alta) con exportación a Excel, PDF y Word.

Características:
- Validación de nombre y NIK (16 dígitos, único)
- Búsqueda por nombre, NIK o dirección
- Mismo contenido tabular en las tres exportaciones
"""

from .logic import build_report_context, build_sheet_rows, render_pdf_html, render_doc_html
from .exporter import ExportCoordinator
from .service import RegistryService

__all__ = [
    "build_report_context",
    "build_sheet_rows",
    "render_pdf_html",
    "render_doc_html",
    "ExportCoordinator",
    "RegistryService",
]

"""
PDF Engine - Rasterizado de fragmentos HTML a PDF

Envuelve el fragmento HTML del informe en un documento con la
configuración de página (@page) y lo convierte a PDF con WeasyPrint.
La conversión se ejecuta fuera del hilo llamador y se expone como
corrutina: quien exporta debe esperarla antes de dar el PDF por generado.
No hay cancelación.
"""

import asyncio
from pathlib import Path

from core.schema_models import PdfOptions
from core.utils import setup_logger, ensure_directory

logger = setup_logger(__name__)

BASE_DPI = 96


def build_pdf_document(html_fragment: str, options: PdfOptions) -> str:
    """
    Envuelve el fragmento en un documento HTML con tamaño y márgenes.

    Args:
        html_fragment: Contenido del informe (cabecera + tabla)
        options: Opciones de página

    Returns:
        Documento HTML completo listo para rasterizar
    """
    page_css = (
        f"@page {{ size: {options.page_format.upper()} {options.orientation}; "
        f"margin: {options.margin_mm:g}mm; }}"
    )
    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<style>{page_css}</style>\n"
        "</head>\n<body>\n"
        f"{html_fragment}\n"
        "</body>\n</html>\n"
    )


def _render_pdf(document: str, output_path: Path, options: PdfOptions) -> None:
    from weasyprint import HTML

    HTML(string=document).write_pdf(
        str(output_path),
        jpeg_quality=int(round(options.image_quality * 100)),
        dpi=int(BASE_DPI * options.raster_scale),
    )


async def write_pdf(html_fragment: str, output_path: Path, options: PdfOptions) -> Path:
    """
    Genera el PDF a partir del fragmento HTML.

    Args:
        html_fragment: Fragmento HTML del informe
        output_path: Path de salida (.pdf)
        options: Opciones de página y rasterizado

    Returns:
        Path al archivo generado, una vez terminado el rasterizado
    """
    ensure_directory(output_path.parent)
    document = build_pdf_document(html_fragment, options)

    logger.info(f"Rasterizando PDF ({options.page_format.upper()} {options.orientation}, "
                f"escala {options.raster_scale:g})...")
    await asyncio.to_thread(_render_pdf, document, output_path, options)

    logger.info(f"✅ PDF generado: {output_path}")
    return output_path

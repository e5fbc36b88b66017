"""
Excel Engine - Escritura de libros de hoja de cálculo

Construye un libro con una única hoja a partir de filas ya formateadas
(una lista de diccionarios con las cabeceras como claves) y fija el ancho
de cada columna.
"""

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
from openpyxl.utils import get_column_letter

from core.schema_models import ReportColumn
from core.utils import setup_logger, ensure_directory

logger = setup_logger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def write_workbook(rows: List[Dict[str, Any]], columns: List[ReportColumn],
                   sheet_name: str, output_path: Path) -> Path:
    """
    Escribe las filas en un libro .xlsx.

    Args:
        rows: Filas con las cabeceras de columns como claves
        columns: Definición de columnas (orden, cabecera y ancho)
        sheet_name: Nombre de la hoja
        output_path: Path de salida (.xlsx)

    Returns:
        Path al archivo generado
    """
    ensure_directory(output_path.parent)

    headers = [column.label for column in columns]
    df = pd.DataFrame(rows, columns=headers)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

        worksheet = writer.sheets[sheet_name]
        for index, column in enumerate(columns, start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = column.width

    logger.info(f"✅ Libro Excel generado: {output_path} ({len(df)} filas)")
    return output_path

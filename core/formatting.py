"""
Formatting - Formateo de valores para pantalla y exportación

Funciones puras que convierten importes, textos y fechas en las cadenas
que aparecen en la tabla y en los informes. El locale es fijo (id-ID):
moneda IDR sin decimales y fechas con el formato de toLocaleString.
"""

import math
from datetime import datetime
from typing import Optional, Union

CURRENCY_SYMBOL = "Rp"
THOUSANDS_SEPARATOR = "."
NBSP = "\u00a0"

_MARKUP_ENTITIES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#039;',
}


def currency(amount: Optional[Union[int, float]]) -> str:
    """
    Formatea un importe como moneda IDR sin decimales.

    Args:
        amount: Importe entero. None se trata como 0 (valor recuperado de
            un null persistido); NaN se muestra tal cual.

    Returns:
        Texto como "Rp 5.000.000" (con espacio no separable)

    Ejemplo:
        >>> currency(50000)
        'Rp\\xa050.000'
    """
    if amount is None:
        amount = 0

    if isinstance(amount, float):
        if math.isnan(amount):
            return f"{CURRENCY_SYMBOL}{NBSP}NaN"
        amount = int(round(amount))

    sign = '-' if amount < 0 else ''
    grouped = f"{abs(amount):,}".replace(',', THOUSANDS_SEPARATOR)
    return f"{sign}{CURRENCY_SYMBOL}{NBSP}{grouped}"


def escape_markup(text: str) -> str:
    """
    Sustituye los cinco caracteres sensibles en HTML por sus entidades.

    Se aplica a nombre y dirección en las exportaciones HTML; nunca al NIK
    ni a cadenas ya formateadas (importe, fecha).
    """
    return ''.join(_MARKUP_ENTITIES.get(char, char) for char in text)


def format_display_datetime(moment: datetime) -> str:
    """
    Formatea una fecha/hora según la convención id-ID.

    Día y mes sin ceros a la izquierda, hora con puntos:
    "5/1/2024, 09.07.03".
    """
    return (
        f"{moment.day}/{moment.month}/{moment.year}, "
        f"{moment.hour:02d}.{moment.minute:02d}.{moment.second:02d}"
    )


def timestamp_now(now: Optional[datetime] = None) -> str:
    """Fecha y hora actual formateada para mostrar (alta y cabeceras)."""
    return format_display_datetime(now or datetime.now())


def file_timestamp(now: Optional[datetime] = None) -> str:
    """Marca compacta y ordenable para nombres de fichero: YYYYMMDD_HHMM."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M")

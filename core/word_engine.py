"""
Word Engine - Escritura de documentos compatibles con Word

El documento .doc es una carga HTML con los espacios de nombres de Office
declarados en la etiqueta raíz; Word lo abre como documento propio. Este
motor solo escribe los bytes: el HTML lo genera el plugin del informe.
"""

from pathlib import Path

from core.utils import setup_logger, ensure_directory

logger = setup_logger(__name__)

DOC_MIME_TYPE = "application/vnd.ms-word"


def write_word_document(html: str, output_path: Path) -> Path:
    """
    Escribe el HTML como documento .doc.

    Args:
        html: Documento HTML completo (con namespaces de Office)
        output_path: Path de salida (.doc)

    Returns:
        Path al archivo generado
    """
    ensure_directory(output_path.parent)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(html)

    logger.info(f"✅ Documento Word generado: {output_path} ({DOC_MIME_TYPE})")
    return output_path

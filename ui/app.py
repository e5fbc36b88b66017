"""
App - Aplicación principal Streamlit

Interfaz web del registro de datos de penduduk. Solo presenta: toda la
lógica (validación, persistencia, búsqueda y exportación) vive en el motor.
"""

import asyncio
import sys
from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

# Ensure the project root is in the Python path when running directly with Streamlit
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config_loader import load_settings
from core.excel_engine import XLSX_MIME_TYPE
from core.registry import Registry
from core.schema_models import Notification, NotificationType, Record
from core.utils import setup_logger, set_log_level
from core.word_engine import DOC_MIME_TYPE
from reports.data_penduduk.logic import build_report_rows, get_report_settings
from reports.data_penduduk.service import RegistryService

logger = setup_logger(__name__)

PDF_MIME_TYPE = "application/pdf"

NOTIFICATION_ICONS = {
    NotificationType.SUCCESS: "✅",
    NotificationType.DANGER: "🚫",
    NotificationType.WARNING: "⚠️",
    NotificationType.INFO: "ℹ️",
}


# ==============================================================================
# CONFIGURACIÓN DE LA PÁGINA
# ==============================================================================

st.set_page_config(
    page_title="Data Penduduk",
    page_icon="📋",
    layout="wide",
)


# ==============================================================================
# ESTADO DE SESIÓN
# ==============================================================================

@st.cache_resource
def get_shared_registry() -> Registry:
    """Registro único del proceso, compartido por todas las sesiones."""
    settings = load_settings()
    set_log_level(settings.log_level)
    logger.info("Registro compartido inicializado")
    return RegistryService.build_registry(settings)


def init_session_state():
    """Inicializa el servicio (una vez por sesión) y la cola de notificaciones."""
    if 'notifications' not in st.session_state:
        st.session_state.notifications = []

    if 'service' not in st.session_state:
        settings = load_settings()

        # Registro compartido; notificaciones propias de cada sesión
        service = RegistryService.from_settings(settings, registry=get_shared_registry())
        service.subscribe(lambda n: st.session_state.notifications.append(n))
        st.session_state.service = service
        logger.info("Servicio de registro inicializado")

    if 'last_export' not in st.session_state:
        st.session_state.last_export = None


def get_service() -> RegistryService:
    return st.session_state.service


def show_notifications():
    """Muestra y consume las notificaciones pendientes como toasts."""
    pending: List[Notification] = st.session_state.notifications
    while pending:
        notification = pending.pop(0)
        st.toast(notification.message, icon=NOTIFICATION_ICONS[notification.type])


# ==============================================================================
# FORMULARIO DE ALTA
# ==============================================================================

def render_form():
    st.subheader("📝 Input Data")

    with st.form("data_form", clear_on_submit=True):
        nama = st.text_input("Nama Lengkap", placeholder="Minimal 3 karakter")
        nik = st.text_input("NIK", placeholder="16 digit angka", max_chars=16)
        alamat = st.text_area("Alamat")
        nominal = st.text_input("Nominal (Rp)", placeholder="0")

        submitted = st.form_submit_button("➕ Tambah Data", type="primary",
                                          use_container_width=True)

    if submitted:
        get_service().add_record(nama, nik, alamat, nominal)


# ==============================================================================
# TABLA Y BÚSQUEDA
# ==============================================================================

def records_to_dataframe(records: List[Record]) -> pd.DataFrame:
    columns = get_report_settings().columns
    rows = build_report_rows(records)
    return pd.DataFrame(
        [[getattr(row, column.id) for column in columns] for row in rows],
        columns=[column.label for column in columns],
    )


def render_table():
    service = get_service()
    all_records = service.records()

    col1, col2 = st.columns([3, 1])
    with col1:
        query = st.text_input("🔍 Cari berdasarkan nama, NIK, atau alamat", key="search_query")
    with col2:
        st.metric("Total Data", len(all_records))

    records = service.search(query) if query else all_records

    if not records:
        if query.strip():
            st.info("🔍 Tidak ada data yang cocok dengan pencarian Anda.")
        else:
            st.info("📭 Belum ada data. Silakan tambahkan data baru.")
        return

    st.dataframe(records_to_dataframe(records), hide_index=True, use_container_width=True)

    with st.expander("🗑️ Hapus data"):
        options = {f"{r.name} ({r.national_id})": r.id for r in records}
        selected = st.selectbox("Pilih data", options=list(options.keys()), key="delete_selector")

        record = service.get_record(options[selected])
        if record is None:
            # Eliminado desde otra sesión
            st.warning("Data sudah tidak ada.")
            return
        st.caption(f"{record.name} · {record.national_id} · {record.address or '-'} · "
                   f"{record.created_at}")

        confirmed = st.checkbox("Apakah Anda yakin ingin menghapus data ini?", key="confirm_delete")

        if st.button("🗑️ Hapus", disabled=not confirmed):
            service.delete_record(record.id)
            st.rerun()


# ==============================================================================
# EXPORTACIONES
# ==============================================================================

def run_export(kind: str):
    service = get_service()

    if kind == 'excel':
        path, mime = service.export_excel(), XLSX_MIME_TYPE
    elif kind == 'pdf':
        with st.spinner("Membuat PDF..."):
            path, mime = asyncio.run(service.export_pdf()), PDF_MIME_TYPE
    else:
        path, mime = service.export_word(), DOC_MIME_TYPE

    st.session_state.last_export = (str(path), mime) if path else None


def render_exports():
    st.subheader("📥 Unduh Laporan")

    col1, col2, col3 = st.columns(3)
    with col1:
        if st.button("📊 Excel", use_container_width=True):
            run_export('excel')
    with col2:
        if st.button("📄 PDF", use_container_width=True):
            run_export('pdf')
    with col3:
        if st.button("📝 Word", use_container_width=True):
            run_export('word')

    if st.session_state.last_export:
        path_str, mime = st.session_state.last_export
        output_path = Path(path_str)
        try:
            with open(output_path, 'rb') as f:
                file_data = f.read()

            st.download_button(
                label=f"📥 {output_path.name}",
                data=file_data,
                file_name=output_path.name,
                mime=mime,
                use_container_width=True,
            )
        except OSError as e:
            st.error(f"Gagal menyiapkan unduhan: {e}")


def render_danger_zone():
    with st.expander("⚠️ Hapus semua data"):
        confirmed = st.checkbox(
            "⚠️ Apakah Anda yakin ingin menghapus SEMUA data? "
            "Tindakan ini tidak dapat dibatalkan!",
            key="confirm_delete_all",
        )
        if st.button("🗑️ Hapus Semua", type="secondary", disabled=not confirmed):
            get_service().delete_all()
            st.session_state.last_export = None
            st.rerun()


# ==============================================================================
# INTERFAZ PRINCIPAL
# ==============================================================================

def main():
    """Función principal de la aplicación."""
    init_session_state()

    st.title("📋 Data Penduduk")

    left, right = st.columns([1, 2])
    with left:
        render_form()
        render_exports()
        render_danger_zone()
    with right:
        render_table()

    show_notifications()


# ==============================================================================
# PUNTO DE ENTRADA
# ==============================================================================

if __name__ == "__main__":
    main()

import asyncio
from datetime import datetime
from pathlib import Path

from openpyxl import load_workbook

from core.schema_models import EngineEvent, NotificationType, PdfOptions, ReportSettings
from reports.data_penduduk.exporter import ExportCoordinator

NBSP = "\u00a0"


class RecordingSinks:
    """Sinks falsos que registran lo que reciben sin generar ficheros."""

    def __init__(self):
        self.calls = []

    def excel(self, rows, columns, sheet_name, output_path):
        self.calls.append(("excel", rows, sheet_name, output_path))
        return output_path

    async def pdf(self, html, output_path, options):
        await asyncio.sleep(0)
        self.calls.append(("pdf", html, options, output_path))
        return output_path

    def doc(self, html, output_path):
        self.calls.append(("doc", html, output_path))
        return output_path


def _coordinator(registry, notifications, tmp_path, sinks):
    return ExportCoordinator(
        registry,
        tmp_path,
        notifications=notifications,
        settings=ReportSettings(),
        excel_sink=sinks.excel,
        pdf_sink=sinks.pdf,
        doc_sink=sinks.doc,
    )


def test_empty_registry_exports_nothing(registry, notifications, tmp_path):
    sinks = RecordingSinks()
    coordinator = _coordinator(registry, notifications, tmp_path, sinks)

    assert coordinator.export_excel() is None
    assert asyncio.run(coordinator.export_pdf()) is None
    assert coordinator.export_word() is None

    assert sinks.calls == []
    assert list(tmp_path.iterdir()) == []
    assert [n.event for n in notifications.received] == [EngineEvent.EXPORT_FAILED] * 3
    assert all(n.type == NotificationType.DANGER for n in notifications.received)
    assert notifications.received[0].message == "❌ Tidak ada data untuk diunduh!"


def test_export_excel_hands_rows_to_sink(registry, budi, notifications, tmp_path):
    sinks = RecordingSinks()
    path = _coordinator(registry, notifications, tmp_path, sinks).export_excel()

    kind, rows, sheet_name, output_path = sinks.calls[0]
    assert kind == "excel"
    assert sheet_name == "Data Penduduk"
    assert rows[0]["Nominal (Rp)"] == f"Rp{NBSP}5.000.000"
    assert path == output_path
    assert path.parent == tmp_path
    assert path.name.startswith("Data_Penduduk_")
    assert path.suffix == ".xlsx"
    assert notifications.last.message == "✓ Berhasil mengunduh file Excel!"
    assert notifications.last.event == EngineEvent.EXPORT_SUCCEEDED


def test_export_pdf_waits_for_sink(registry, budi, notifications, tmp_path):
    sinks = RecordingSinks()
    path = asyncio.run(_coordinator(registry, notifications, tmp_path, sinks).export_pdf())

    kind, html, options, output_path = sinks.calls[0]
    assert kind == "pdf"
    assert "Budi Santoso" in html
    assert isinstance(options, PdfOptions)
    assert options.orientation == "portrait"
    assert path == output_path
    assert path.suffix == ".pdf"
    assert notifications.last.message == "✓ Berhasil mengunduh file PDF!"


def test_export_word_hands_document_to_sink(registry, budi, notifications, tmp_path):
    sinks = RecordingSinks()
    path = _coordinator(registry, notifications, tmp_path, sinks).export_word()

    kind, html, output_path = sinks.calls[0]
    assert kind == "doc"
    assert "urn:schemas-microsoft-com:office:word" in html
    assert path.suffix == ".doc"
    assert notifications.last.message == "✓ Berhasil mengunduh file Word!"


def test_sink_failure_is_reported(registry, budi, notifications, tmp_path):
    async def broken_pdf(html, output_path, options):
        raise RuntimeError("rasterizer crashed")

    coordinator = ExportCoordinator(registry, tmp_path, notifications=notifications,
                                    settings=ReportSettings(), pdf_sink=broken_pdf)

    assert asyncio.run(coordinator.export_pdf()) is None
    assert notifications.last.event == EngineEvent.EXPORT_FAILED
    assert notifications.last.message == "❌ Gagal membuat file PDF!"


def test_real_excel_sink_writes_workbook(registry, budi, notifications, tmp_path):
    coordinator = ExportCoordinator(registry, tmp_path, notifications=notifications,
                                    settings=ReportSettings())
    path = coordinator.export_excel()

    assert path is not None and path.exists()
    workbook = load_workbook(path)
    assert workbook.sheetnames == ["Data Penduduk"]

    sheet = workbook["Data Penduduk"]
    values = list(sheet.iter_rows(values_only=True))
    assert values[0] == ("No", "Nama", "NIK", "Alamat", "Nominal (Rp)", "Tanggal Input")
    assert values[1] == (1, "Budi Santoso", "3201012345678901", "Jl. Merdeka No. 1",
                         f"Rp{NBSP}5.000.000", "5/1/2024, 09.07.03")
    widths = [sheet.column_dimensions[letter].width for letter in "ABCDEF"]
    assert widths == [5, 25, 18, 30, 15, 20]


def test_real_word_sink_writes_html_payload(registry, budi, notifications, tmp_path):
    coordinator = ExportCoordinator(registry, tmp_path, notifications=notifications,
                                    settings=ReportSettings())
    path = coordinator.export_word()

    content = Path(path).read_text(encoding="utf-8")
    assert content.lstrip().startswith("<html xmlns:o=")
    assert "3201012345678901" in content


def test_repeated_export_in_same_minute_keeps_both_files(registry, budi, notifications, tmp_path):
    fixed = datetime(2024, 1, 5, 9, 7, 3)
    coordinator = ExportCoordinator(registry, tmp_path, notifications=notifications,
                                    settings=ReportSettings(), clock=lambda: fixed)

    first = coordinator.export_word()
    second = coordinator.export_word()
    third = coordinator.export_word()

    assert first.name == "Data_Penduduk_20240105_0907.doc"
    assert second.name == "Data_Penduduk_20240105_0907 (1).doc"
    assert third.name == "Data_Penduduk_20240105_0907 (2).doc"
    assert len(list(tmp_path.iterdir())) == 3


def test_output_path_depends_on_kind_only_for_collisions(registry, tmp_path):
    fixed = datetime(2024, 1, 5, 9, 7, 3)
    coordinator = ExportCoordinator(registry, tmp_path, settings=ReportSettings(),
                                    clock=lambda: fixed)
    (tmp_path / "Data_Penduduk_20240105_0907.doc").write_text("x", encoding="utf-8")

    assert coordinator.output_path("excel").name == "Data_Penduduk_20240105_0907.xlsx"
    assert coordinator.output_path("word").name == "Data_Penduduk_20240105_0907 (1).doc"

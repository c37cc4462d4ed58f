from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pypdf import PdfReader

from core.config.config_service import ConfigService
from pdf_envelope import cli
from pdf_envelope.logic import assembly_pipeline


@pytest.fixture
def config(tmp_path: Path) -> ConfigService:
    environ = {"PDFENVELOPE_APP_IO__RETRY_DELAY_SECONDS": "0"}
    return ConfigService(environ=environ, user_ini=tmp_path / "no-user.ini")


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "appsettings.json"
    path.write_text(json.dumps({
        "PdfEnvelope": {
            "CoverPage": {"Title": "CLI Report"},
            "PageFooter": {"TextRight1": "Page {pageNum} of {numOfPages}", "ExcludeCoverPage": True},
        }
    }), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _drop_console_handler():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "pdf_envelope_console":
            root.removeHandler(handler)


def test_success(tmp_path: Path, source_pdf: Path, settings_file: Path, config, capsys) -> None:
    output = tmp_path / "out.pdf"
    code = cli.main(["-f", str(source_pdf), "-o", str(output), "-s", str(settings_file)], config=config)

    assert code == 0
    reader = PdfReader(str(output))
    assert len(reader.pages) == 2
    assert "CLI Report" in reader.pages[0].extract_text()
    assert f"Output file: {output.resolve()}" in capsys.readouterr().out


def test_missing_input_argument(config, capsys) -> None:
    assert cli.main([], config=config) == 1
    assert "usage:" in capsys.readouterr().err


def test_input_file_does_not_exist(tmp_path: Path, config) -> None:
    assert cli.main(["-f", str(tmp_path / "missing.pdf")], config=config) == 1


def test_existing_output_without_overwrite(tmp_path: Path, source_pdf: Path, settings_file: Path,
                                           config) -> None:
    output = tmp_path / "out.pdf"
    output.write_bytes(b"existing")
    args = ["-f", str(source_pdf), "-o", str(output), "-s", str(settings_file)]

    assert cli.main(args, config=config) == 1
    assert output.read_bytes() == b"existing"

    assert cli.main(args + ["-y"], config=config) == 0
    assert len(PdfReader(str(output)).pages) == 2


def test_in_place_needs_overwrite_flag(source_pdf: Path, settings_file: Path, config) -> None:
    before = source_pdf.read_bytes()
    assert cli.main(["-f", str(source_pdf), "-s", str(settings_file)], config=config) == 1
    assert source_pdf.read_bytes() == before

    assert cli.main(["--inputFile", str(source_pdf), "--overwrite-yes",
                     "--settings", str(settings_file)], config=config) == 0
    assert len(PdfReader(str(source_pdf)).pages) == 2


def test_broken_settings_file(tmp_path: Path, source_pdf: Path, config) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    code = cli.main(["-f", str(source_pdf), "-o", str(tmp_path / "out.pdf"), "-s", str(broken)],
                    config=config)
    assert code == 1
    assert not (tmp_path / "out.pdf").exists()


def test_run_log_is_written(tmp_path: Path, source_pdf: Path, settings_file: Path) -> None:
    db = tmp_path / "runs.db"
    config = ConfigService(
        environ={"PDFENVELOPE_APP_LOGGING__RUN_LOG_DB": str(db)},
        user_ini=tmp_path / "no-user.ini",
    )
    code = cli.main(["-f", str(source_pdf), "-o", str(tmp_path / "out.pdf"), "-s", str(settings_file)],
                    config=config)
    assert code == 0
    assert db.is_file()


def test_overlay_failure_reports_kept_file(tmp_path: Path, source_pdf: Path, settings_file: Path,
                                           config, monkeypatch, capsys) -> None:
    def broken(self, writer):
        raise RuntimeError("overlay font missing")

    monkeypatch.setattr(assembly_pipeline.HeaderFooterOverlay, "apply", broken)
    code = cli.main(["-f", str(source_pdf), "-y", "-s", str(settings_file)], config=config)

    assert code == 1
    out = capsys.readouterr().out
    assert "Intermediate file kept for inspection: " in out
    assert "source.pdf-output-" in out

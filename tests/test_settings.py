from __future__ import annotations

import json
from datetime import date

from faktura.core.numbering import default_invoice_number, document_file_name
from faktura.core.settings import Settings, load_settings, save_settings


def test_missing_file_writes_defaults(tmp_path):
    path = tmp_path / "settings.json"
    settings = load_settings(path)
    assert settings == Settings()
    assert json.loads(path.read_text(encoding="utf-8"))["language"] == "sr"


def test_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    save_settings(Settings(language="en", qr_pixel_size=400, output_dir=str(tmp_path)), path)
    loaded = load_settings(path)
    assert loaded.language == "en"
    assert loaded.qr_pixel_size == 400
    assert loaded.resolved_output_dir() == tmp_path
    assert not path.with_suffix(".json.tmp").exists()


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{broken", encoding="utf-8")
    assert load_settings(path) == Settings()
    # Left alone for the user to fix
    assert path.read_text(encoding="utf-8") == "{broken"


def test_unknown_keys_ignored():
    assert Settings.from_dict({"language": "en", "theme": "dark"}).language == "en"


def test_default_font_is_bundled():
    assert Settings().resolved_font_path().is_file()
    assert Settings().resolved_bold_font_path() is None


def test_default_invoice_number():
    assert default_invoice_number(date(2026, 10, 18)) == "20261018"


def test_document_file_names():
    assert document_file_name("2026-001", "sr") == "faktura-2026-001.pdf"
    assert document_file_name("INV 7", "en") == "invoice-INV-7.pdf"
    assert document_file_name("2026/14") == "faktura-2026-14.pdf"
    assert document_file_name("  ", "sr") == "faktura-bez-broja.pdf"

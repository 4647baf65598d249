from __future__ import annotations

import json

import pytest

from faktura.core import paths
from faktura.core.settings import Settings, save_settings
from faktura.data import repo
from faktura.data.db import init_db

COMPANY = {
    "name": "Main company",
    "legal_name": "Test d.o.o.",
    "address": "Bulevar 1",
    "tax_id": "100000001",
    "registration_id": "12345678",
    "email": "office@test.rs",
    "bank_account": "160-1234567-89",
}


@pytest.fixture(autouse=True)
def db(tmp_path):
    init_db(tmp_path / "profiles.db")


def test_company_crud():
    saved = repo.save_company(COMPANY)
    assert saved.id
    assert [p.id for p in repo.list_companies()] == [saved.id]

    updated = repo.update_company(saved.id, {"email": "new@test.rs"})
    assert updated is not None and updated.email == "new@test.rs"
    assert repo.update_company("missing", {"email": "x@y.rs"}) is None

    assert repo.delete_company(saved.id) == 1
    assert repo.delete_company(saved.id) == 0
    assert repo.list_companies() == []


def test_client_crud():
    saved = repo.save_client({"name": "Kupac", "legal_name": "Client d.o.o.", "tax_id": "2"})
    assert repo.list_clients()[0].legal_name == "Client d.o.o."
    assert repo.update_client(saved.id, {"address": "Ulica 2"}).address == "Ulica 2"
    assert repo.delete_client(saved.id) == 1


def test_name_is_required():
    with pytest.raises(ValueError):
        repo.save_company({"name": "  ", "legal_name": "X"})
    saved = repo.save_client({"name": "Kupac"})
    with pytest.raises(ValueError):
        repo.update_client(saved.id, {"name": ""})


def test_to_party_prefers_legal_name():
    company = repo.save_company(COMPANY)
    party = repo.to_party(company)
    assert party.name == "Test d.o.o."
    assert party.bank_account == "160-1234567-89"

    client = repo.save_client({"name": "Kupac"})
    assert repo.to_party(client).name == "Kupac"
    assert repo.to_party(client).email == ""


def test_export_then_import_into_fresh_db(tmp_path):
    repo.save_company(COMPANY)
    repo.save_client({"name": "Kupac", "legal_name": "Client d.o.o."})
    export = tmp_path / "profiles.json"
    assert repo.export_profiles(export) == (1, 1)
    payload = json.loads(export.read_text(encoding="utf-8"))
    assert payload["companies"][0]["legal_name"] == "Test d.o.o."

    init_db(tmp_path / "other.db")
    assert repo.list_companies() == []
    assert repo.import_profiles(export) == (1, 1)
    assert repo.list_companies()[0].tax_id == "100000001"
    assert repo.list_clients()[0].name == "Kupac"


def test_import_skips_nameless_rows(tmp_path):
    path = tmp_path / "in.json"
    path.write_text(json.dumps({"companies": [{"name": ""}, {"name": "Ok"}], "clients": []}), encoding="utf-8")
    assert repo.import_profiles(path) == (1, 0)


def test_import_rejects_other_files(tmp_path):
    path = tmp_path / "in.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError):
        repo.import_profiles(path)
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        repo.import_profiles(path)


def test_init_db_reads_path_from_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "user_writable_dir", lambda: tmp_path)
    db_file = tmp_path / "data" / "from-settings.db"
    save_settings(Settings(db_path=str(db_file)), tmp_path / "settings.json")

    init_db()
    repo.save_client({"name": "Kupac"})
    assert db_file.is_file()

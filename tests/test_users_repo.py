import json
import os
import stat

import pytest

from usuarios.core.models import UserRecord, parse_age, parse_id, utc_timestamp
from usuarios.infra.users_repo import JsonFileUserRepository


def test_missing_file_is_empty_collection(tmp_path):
    repo = JsonFileUserRepository(tmp_path / "nope.json")
    assert repo.load() == []


def test_invalid_json_is_treated_as_empty(tmp_path):
    p = tmp_path / "usuarios.json"
    p.write_text("{not json", encoding="utf-8")
    assert JsonFileUserRepository(p).load() == []


def test_non_list_document_is_treated_as_empty(tmp_path):
    p = tmp_path / "usuarios.json"
    p.write_text(json.dumps({"id": 1}), encoding="utf-8")
    assert JsonFileUserRepository(p).load() == []


def test_save_rewrites_whole_file_as_indented_array(tmp_path):
    p = tmp_path / "sub" / "usuarios.json"
    repo = JsonFileUserRepository(p)
    repo.save([{"id": 1, "nombre": "Núria", "email": "n@x"}])
    text = p.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert "Núria" in text
    repo.save([])
    assert json.loads(p.read_text(encoding="utf-8")) == []
    # No temp files left behind
    assert [f.name for f in p.parent.iterdir()] == ["usuarios.json"]


def test_record_dict_uses_storage_keys():
    rec = UserRecord(id=1, name="A", email="a@x", age=3, photo=None, created_at="t")
    assert rec.to_dict() == {"id": 1, "nombre": "A", "email": "a@x", "edad": 3, "createdAt": "t", "foto": None}
    assert UserRecord.from_dict(rec.to_dict()) == rec


def test_parse_age_follows_leading_digits():
    assert parse_age("42 años") == 42
    assert parse_age(17) == 17
    assert parse_age("abc") is None
    assert parse_age("") is None
    assert parse_age(0) is None
    assert parse_age(None) is None


def test_parse_id_is_lenient():
    assert parse_id("12abc") == 12
    assert parse_id("x12") is None
    assert parse_id(5) == 5


def test_utc_timestamp_has_millis_and_z():
    ts = utc_timestamp()
    assert ts.endswith("Z")
    assert len(ts.split(".")[-1]) == 4  # "123Z"


def test_numbers_that_cannot_become_ints_parse_as_none():
    huge = "9" * 5000
    assert parse_age(float("inf")) is None
    assert parse_age(float("nan")) is None
    assert parse_age(huge) is None
    assert parse_id(huge) is None
    assert parse_age(21.9) == 21


def test_load_keeps_rows_that_are_not_objects(tmp_path):
    p = tmp_path / "usuarios.json"
    p.write_text(json.dumps([{"id": 1}, "suelta", 7]), encoding="utf-8")
    assert JsonFileUserRepository(p).load() == [{"id": 1}, "suelta", 7]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_save_keeps_existing_file_mode(tmp_path):
    p = tmp_path / "usuarios.json"
    p.write_text("[]", encoding="utf-8")
    os.chmod(p, 0o640)
    JsonFileUserRepository(p).save([{"id": 1}])
    assert stat.S_IMODE(p.stat().st_mode) == 0o640


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_save_new_file_is_world_readable(tmp_path):
    p = tmp_path / "nuevo.json"
    JsonFileUserRepository(p).save([])
    assert stat.S_IMODE(p.stat().st_mode) == 0o644

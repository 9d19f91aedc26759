"""Tests for seeding the SQLite store from a Firebase JSON export."""

from __future__ import annotations

import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from edubot.db.models import School
from edubot.db.seed import _schools_node, main, record_to_school

EXPORT = {
    "schools": {
        "-Nx1": {
            "name": "Delhi Public School",
            "classes": ["9", "10"],
            "location": "New Delhi",
            "type": "Public",
            "distence": 5,
            "fee": 0,
            "midday": True,
            "girlSupport": True,
        },
        "-Nx2": {"name": "Kendriya Vidyalaya", "classes": "10", "fee": "400", "midday": "yes"},
    },
    "users": {"u1": {"email": "someone@example.com"}},
}


def _schools_in(db_path) -> list[School]:
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        schools = session.query(School).order_by(School.key).all()
    engine.dispose()
    return schools


class TestSchoolsNode:
    def test_whole_database_export(self):
        assert set(_schools_node(EXPORT)) == {"-Nx1", "-Nx2"}

    def test_node_only_export(self):
        assert set(_schools_node(EXPORT["schools"])) == {"-Nx1", "-Nx2"}

    def test_array_export_uses_indices(self):
        assert _schools_node([None, {"name": "A"}]) == {"1": {"name": "A"}}

    def test_empty_export(self):
        assert _schools_node({"schools": None}) == {}

    def test_unsupported_export(self):
        with pytest.raises(ValueError):
            _schools_node("schools")


class TestRecordToSchool:
    def test_wrongly_typed_values_are_dropped(self):
        school = record_to_school("-Nx2", EXPORT["schools"]["-Nx2"])
        assert school.fee is None
        assert school.midday is None
        assert school.classes == "10"

    def test_booleans_are_not_numbers(self):
        school = record_to_school("k", {"distence": True})
        assert school.distence is None


class TestSeedMain:
    def test_seeds_schools(self, tmp_path):
        export_path = tmp_path / "export.json"
        export_path.write_text(json.dumps(EXPORT), encoding="utf-8")
        db_path = tmp_path / "data" / "schools.db"

        main([str(export_path), "--db", str(db_path)])

        schools = _schools_in(db_path)
        assert [s.name for s in schools] == ["Delhi Public School", "Kendriya Vidyalaya"]
        assert schools[0].to_record()["girlSupport"] is True

    def test_rerun_updates_in_place(self, tmp_path):
        export_path = tmp_path / "export.json"
        export_path.write_text(json.dumps(EXPORT), encoding="utf-8")
        db_path = tmp_path / "schools.db"
        main([str(export_path), "--db", str(db_path)])

        updated = json.loads(json.dumps(EXPORT))
        updated["schools"]["-Nx2"]["fee"] = 350
        export_path.write_text(json.dumps(updated), encoding="utf-8")
        main([str(export_path), "--db", str(db_path)])

        schools = _schools_in(db_path)
        assert len(schools) == 2
        assert schools[1].fee == 350.0

    def test_unreadable_export_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main([str(tmp_path / "missing.json"), "--db", str(tmp_path / "schools.db")])

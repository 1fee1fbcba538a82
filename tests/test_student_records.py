import pytest

from utils import db_conn, student_records
from utils.student_records import RecordTransportError, StudentNotFoundError


class FakeCursor:
    def __init__(self, tables, log):
        self.tables = tables
        self.log = log
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params):
        self.log.append((" ".join(query.split()), params))
        for table, rows in self.tables.items():
            if f"FROM {table} " in " ".join(query.split()) + " ":
                self._rows = rows
                return
        raise RuntimeError("unknown table")

    def fetchall(self):
        return self._rows


class FakeConnection:
    def __init__(self, tables):
        self.tables = tables
        self.log = []

    def cursor(self):
        return FakeCursor(self.tables, self.log)


def use_tables(monkeypatch, tables):
    conn = FakeConnection(tables)
    monkeypatch.setattr(student_records, "get_db_connection", lambda: conn)
    return conn


def test_fetch_record_set(monkeypatch):
    conn = use_tables(
        monkeypatch,
        {
            "students": [{"id": 3, "fullname": "Bilal", "class": "7", "section": "A"}],
            "exams": [{"id": 1, "subject": "Math"}],
            "quiz": [],
            "student_progress_report": [],
            "rechecking_schedule": [],
        },
    )
    records = student_records.fetch_record_set(3)
    assert records["student"]["fullname"] == "Bilal"
    assert records["exams"] == [{"id": 1, "subject": "Math"}]
    assert records["quizzes"] == []
    assert all(params == (3,) for _, params in conn.log)


def test_missing_student_raises_not_found(monkeypatch):
    conn = use_tables(monkeypatch, {"students": []})
    with pytest.raises(StudentNotFoundError):
        student_records.fetch_record_set(99)
    # record tables are not queried for an unknown student
    assert len(conn.log) == 1


def test_driver_errors_are_wrapped(monkeypatch):
    use_tables(monkeypatch, {"students": [{"id": 1}]})
    with pytest.raises(RecordTransportError):
        student_records.fetch_exams(1)


def test_connection_failure_is_wrapped(monkeypatch):
    def refuse():
        raise OSError("connection refused")

    monkeypatch.setattr(student_records, "get_db_connection", refuse)
    with pytest.raises(RecordTransportError):
        student_records.fetch_student(1)


def test_local_db_settings(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "local")
    monkeypatch.setenv("LOCAL_DB_PORT", "3307")
    monkeypatch.setenv("LOCAL_DB_NAME", "school")
    settings = db_conn.load_db_settings()
    assert settings["port"] == 3307
    assert settings["name"] == "school"
    assert settings["environment"] == "local"


def test_invalid_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    with pytest.raises(ValueError):
        db_conn.load_db_settings()

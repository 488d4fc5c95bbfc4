"""
Tests for read-only index database access.
"""

import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from docsearch import db


class TestConnect:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            db.connect(tmp_path / "missing.sqlite")

    def test_read_only(self, fts_db):
        conn = db.connect(fts_db)
        try:
            with pytest.raises(sqlite3.Error):
                conn.execute("DELETE FROM docs")
        finally:
            conn.close()


class TestExecuteRead:
    def test_returns_rows(self, fts_db):
        rows = db.execute_read(fts_db, "SELECT count(*) FROM docs")
        assert rows[0][0] == 11

    def test_connection_closed_after_read(self, fts_db, monkeypatch):
        opened: list[sqlite3.Connection] = []
        original = db.connect

        def recording_connect(path=None):
            conn = original(path)
            opened.append(conn)
            return conn

        monkeypatch.setattr(db, "connect", recording_connect)
        db.execute_read(fts_db, "SELECT 1")
        db.execute_read(fts_db, "SELECT 1")

        assert len(opened) == 2
        assert opened[0] is not opened[1]
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    def test_concurrent_reads_run_in_parallel(self, fts_db, monkeypatch):
        # Both reads must be in flight at once for the barrier to release.
        barrier = threading.Barrier(2, timeout=5)
        original = db.connect

        def rendezvous_connect(path=None):
            conn = original(path)
            barrier.wait()
            return conn

        monkeypatch.setattr(db, "connect", rendezvous_connect)
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(db.execute_read, fts_db, "SELECT count(*) FROM docs")
                for _ in range(2)
            ]
            counts = [future.result()[0][0] for future in futures]

        assert counts == [11, 11]

import threading
import pytest
import pymysql

import server

TEST_CONFIG = {
    "db_host": "db.test",
    "db_user": "gateway",
    "db_password": "secret",
    "db_port": 3306,
    "db_name": "node_patient_db",
    "server_host": "127.0.0.1",
    "server_port": 8000,
}


class FakeCursor:
    def __init__(self, database):
        self.database = database
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, values=None):
        self.database.execute(self, sql, values)

    def fetchall(self):
        return self._rows


class FakeConnection:
    def __init__(self, database, params):
        self.database = database
        self.params = params
        self.committed = False
        self.closed = False

    def cursor(self):
        return FakeCursor(self.database)

    def commit(self):
        self.committed = True

    def close(self):
        self.closed = True


class FakeDatabase:
    """In-memory stand-in for a MySQL server holding the patients table."""

    def __init__(self):
        self.lock = threading.Lock()
        self.rows = []
        self.statements = []
        self.connections = []
        self.fail_connect = False
        self.fail_when = None

    def connect(self, **params):
        if self.fail_connect:
            raise pymysql.err.OperationalError(2003, "Can't connect to MySQL server on 'db.test'")
        connection = FakeConnection(self, params)
        with self.lock:
            self.connections.append(connection)
        return connection

    def execute(self, cursor, sql, values):
        with self.lock:
            self.statements.append((sql, values))
            if self.fail_when and self.fail_when(sql, values):
                raise pymysql.err.ProgrammingError(1064, "You have an error in your SQL syntax")

            command = sql.strip().split()[0].upper()
            if command == "SELECT":
                cursor.description = (("patientid",), ("name",), ("dateOfBirth",))
                cursor._rows = [dict(row) for row in self.rows]
                cursor.rowcount = len(self.rows)
            elif command == "INSERT":
                patient_id = len(self.rows) + 1
                name, date_of_birth = values if values else (None, None)
                self.rows.append({"patientid": patient_id, "name": name, "dateOfBirth": date_of_birth})
                cursor.rowcount = 1
                cursor.lastrowid = patient_id
            else:
                cursor.rowcount = 0
                cursor.lastrowid = 0


@pytest.fixture
def config():
    return dict(TEST_CONFIG)


@pytest.fixture
def fake_db(monkeypatch):
    database = FakeDatabase()
    monkeypatch.setattr(pymysql, "connect", database.connect)
    return database


@pytest.fixture
def client(fake_db, config):
    server.app.config.update(TESTING=True, GATEWAY=config)
    with server.app.test_client() as client:
        yield client
    server.app.config.pop("GATEWAY", None)

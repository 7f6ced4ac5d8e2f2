import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from permitpro.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- USERS
-- ============================================================
CREATE TABLE IF NOT EXISTS users (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    email      TEXT NOT NULL UNIQUE,
    name       TEXT NOT NULL,
    role       TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- CONTRACTORS
-- ============================================================
CREATE TABLE IF NOT EXISTS contractors (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    company_name   TEXT NOT NULL,
    license_number TEXT NOT NULL UNIQUE,
    address        TEXT NOT NULL,
    phone_number   TEXT NOT NULL,
    email          TEXT,
    contact_person TEXT,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

-- ============================================================
-- SUBCONTRACTORS
-- ============================================================
CREATE TABLE IF NOT EXISTS subcontractors (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    company_name   TEXT NOT NULL,
    license_number TEXT,
    address        TEXT,
    phone_number   TEXT,
    email          TEXT,
    contact_person TEXT,
    trade_type     TEXT NOT NULL,
    created_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at     TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_subcontractors_trade ON subcontractors(trade_type);

-- ============================================================
-- PACKAGES
-- ============================================================
CREATE TABLE IF NOT EXISTS packages (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    customer_name    TEXT NOT NULL,
    property_address TEXT NOT NULL,
    county           TEXT NOT NULL,
    permit_type      TEXT NOT NULL
                     CHECK(permit_type IN ('Mobile Home Permit','Modular Home Permit','Shed Permit')),
    status           TEXT NOT NULL DEFAULT 'Draft'
                     CHECK(status IN ('Draft','Submitted','Completed')),
    contractor_id    INTEGER REFERENCES contractors(id) ON DELETE RESTRICT,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_packages_status ON packages(status);
CREATE INDEX IF NOT EXISTS idx_packages_contractor ON packages(contractor_id);

-- ============================================================
-- DOCUMENTS
-- ============================================================
CREATE TABLE IF NOT EXISTS documents (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    package_id    INTEGER NOT NULL REFERENCES packages(id) ON DELETE CASCADE,
    file_name     TEXT NOT NULL,
    file_path     TEXT NOT NULL,
    version       TEXT NOT NULL DEFAULT '1.0',
    uploader_name TEXT NOT NULL,
    created_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE INDEX IF NOT EXISTS idx_documents_package ON documents(package_id);

-- ============================================================
-- PACKAGE SUBCONTRACTORS
-- ============================================================
CREATE TABLE IF NOT EXISTS package_subcontractors (
    package_id       INTEGER NOT NULL REFERENCES packages(id) ON DELETE CASCADE,
    subcontractor_id INTEGER NOT NULL REFERENCES subcontractors(id) ON DELETE CASCADE,
    trade_type       TEXT NOT NULL,
    created_at       TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    PRIMARY KEY (package_id, subcontractor_id)
);

-- ============================================================
-- CHECKLIST TEMPLATES
-- ============================================================
CREATE TABLE IF NOT EXISTS checklist_templates (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    county      TEXT NOT NULL,
    permit_type TEXT NOT NULL,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now')),
    UNIQUE (county, permit_type)
);

CREATE TABLE IF NOT EXISTS checklist_items (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    template_id INTEGER NOT NULL REFERENCES checklist_templates(id) ON DELETE CASCADE,
    name        TEXT NOT NULL,
    is_required INTEGER NOT NULL DEFAULT 1,
    is_custom   INTEGER NOT NULL DEFAULT 0,
    sort_order  INTEGER NOT NULL,
    UNIQUE (template_id, name)
);

CREATE INDEX IF NOT EXISTS idx_checklist_items_template ON checklist_items(template_id);

-- ============================================================
-- PACKAGE CHECKLISTS
-- ============================================================
CREATE TABLE IF NOT EXISTS package_checklists (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    package_id  INTEGER NOT NULL UNIQUE REFERENCES packages(id) ON DELETE CASCADE,
    template_id INTEGER REFERENCES checklist_templates(id) ON DELETE SET NULL,
    created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ','now'))
);

CREATE TABLE IF NOT EXISTS package_checklist_items (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    checklist_id     INTEGER NOT NULL REFERENCES package_checklists(id) ON DELETE CASCADE,
    template_item_id INTEGER REFERENCES checklist_items(id) ON DELETE SET NULL,
    name             TEXT NOT NULL,
    is_required      INTEGER NOT NULL DEFAULT 1,
    sort_order       INTEGER NOT NULL,
    is_completed     INTEGER NOT NULL DEFAULT 0,
    completed_at     TEXT,
    completed_by     TEXT,
    notes            TEXT
);

CREATE INDEX IF NOT EXISTS idx_package_checklist_items_checklist
    ON package_checklist_items(checklist_id);
"""


# ALTER statements for databases created by an older SCHEMA_SQL, applied in order
MIGRATIONS: list[str] = []


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # ALTER TABLE fails if the column is already there
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # already applied
    conn.close()

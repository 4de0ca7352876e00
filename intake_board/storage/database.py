"""
SQLite document store for the local intake feed.
Holds raw order and user documents exactly as producers wrote them; the
dashboard never reads canonical records from here, only raw snapshots.
"""
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any
import json

from intake_board.ingestion.normalizer import parse_timestamp

ORDERS_SNAPSHOT_LIMIT = 100
TECHNICIAN_ROLE = "technician"


def intake_sort_key(value: Any) -> Optional[str]:
    """
    Sortable form of a raw intake_date. Timestamps are converted to UTC so
    lexical order matches chronological order; dates that cannot be shifted
    to UTC get no key and sort last.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    try:
        # naive values are taken as local time
        parsed = parsed.astimezone().astimezone(timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None
    return parsed.isoformat()


class Database:
    """SQLite wrapper scoped to one feed project"""

    def __init__(self, db_path: str = "data/intake.db", project_id: str = "default"):
        self.db_path = db_path
        self.project_id = project_id
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self):
        """Establish database connection"""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row  # Enable column access by name
        return self.conn

    def initialize_schema(self):
        """Create document tables"""
        if not self.conn:
            self.connect()

        cursor = self.conn.cursor()

        # Raw order documents, last write wins per document id
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS order_documents (
                project_id TEXT NOT NULL,
                doc_id TEXT NOT NULL,
                data TEXT NOT NULL,  -- JSON
                intake_sort_key TEXT,  -- UTC ISO timestamp, NULL when unparseable
                updated_at TEXT NOT NULL,
                PRIMARY KEY (project_id, doc_id)
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_orders_intake
            ON order_documents(project_id, intake_sort_key DESC)
        """)

        # Shop staff; the technician roster is the subset with role = technician
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS user_documents (
                project_id TEXT NOT NULL,
                doc_id TEXT NOT NULL,
                role TEXT,
                data TEXT NOT NULL,  -- JSON
                updated_at TEXT NOT NULL,
                PRIMARY KEY (project_id, doc_id)
            )
        """)

        self.conn.commit()

    def upsert_order(self, doc_id: str, data: Dict[str, Any]):
        """Insert or replace a raw order document"""
        cursor = self.conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO order_documents VALUES (
                :project_id, :doc_id, :data, :intake_sort_key, :updated_at
            )
        """, {
            'project_id': self.project_id,
            'doc_id': doc_id,
            'data': json.dumps(data, default=str),
            'intake_sort_key': intake_sort_key(data.get('intake_date')),
            'updated_at': datetime.now(timezone.utc).isoformat()
        })
        self.conn.commit()

    def upsert_user(self, doc_id: str, data: Dict[str, Any]):
        """Insert or replace a raw user document"""
        cursor = self.conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO user_documents VALUES (
                :project_id, :doc_id, :role, :data, :updated_at
            )
        """, {
            'project_id': self.project_id,
            'doc_id': doc_id,
            'role': data.get('role'),
            'data': json.dumps(data, default=str),
            'updated_at': datetime.now(timezone.utc).isoformat()
        })
        self.conn.commit()

    def delete_order(self, doc_id: str):
        cursor = self.conn.cursor()
        cursor.execute("""
            DELETE FROM order_documents WHERE project_id = ? AND doc_id = ?
        """, (self.project_id, doc_id))
        self.conn.commit()

    def clear(self):
        """Remove every order and user document of this project"""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM order_documents WHERE project_id = ?", (self.project_id,))
        cursor.execute("DELETE FROM user_documents WHERE project_id = ?", (self.project_id,))
        self.conn.commit()

    def get_order_documents(self, limit: int = ORDERS_SNAPSHOT_LIMIT) -> List[Dict[str, Any]]:
        """Most recent orders first; documents without a usable intake date go last"""
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT doc_id, data FROM order_documents
            WHERE project_id = ?
            ORDER BY intake_sort_key IS NULL, intake_sort_key DESC, doc_id
            LIMIT ?
        """, (self.project_id, limit))
        return [{'id': row['doc_id'], 'data': json.loads(row['data'])} for row in cursor.fetchall()]

    def get_technician_documents(self) -> List[Dict[str, Any]]:
        """Users whose role is technician"""
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT doc_id, data FROM user_documents
            WHERE project_id = ? AND role = ?
            ORDER BY doc_id
        """, (self.project_id, TECHNICIAN_ROLE))
        return [{'id': row['doc_id'], 'data': json.loads(row['data'])} for row in cursor.fetchall()]

    def data_version(self) -> int:
        """Changes whenever another connection commits to the database file"""
        cursor = self.conn.cursor()
        cursor.execute("PRAGMA data_version")
        return cursor.fetchone()[0]

    def count_orders(self) -> int:
        cursor = self.conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM order_documents WHERE project_id = ?", (self.project_id,))
        return cursor.fetchone()[0]

    def count_users(self) -> int:
        cursor = self.conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM user_documents WHERE project_id = ?", (self.project_id,))
        return cursor.fetchone()[0]

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()

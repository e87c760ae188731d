"""
SQLite Database Repository - Guild Settings and Review Persistence
===================================================================

Two tables:
  settings  - one row per guild, created lazily with defaults
  reviews   - append-only, one row per completed review
"""

import json
import sqlite3
import logging
from typing import Any, List, Optional
from contextlib import contextmanager

from ...domain.errors import StorageFailure
from ...domain.models import (
    DEFAULT_EMBED_COLOR,
    DEFAULT_EMBED_DESCRIPTION,
    DEFAULT_EMBED_TITLE,
    GuildSettings,
    Review,
)

logger = logging.getLogger(__name__)

DATABASE_FILE = "reviews.db"

# Columns an update is allowed to touch. Anything else is dropped before SQL is built.
UPDATABLE_SETTINGS = (
    "embed_title",
    "embed_description",
    "embed_color",
    "products",
    "review_channel_id",
    "admin_roles",
)

_JSON_LIST_COLUMNS = ("products", "admin_roles")


class Database:
    """
    SQLite database for the review bot.

    Usage:
        db = Database()
        db.init()

        settings = db.get_settings(guild_id=1234)
        db.update_settings(1234, products=["Logo design", "Banner"])
        review = db.save_review(user_id=1, user_name="Sam", guild_id=1234,
                                rating=5, comment="Great work!", product="Banner")
    """

    def __init__(self, db_path: str = DATABASE_FILE):
        self.db_path = str(db_path)

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init(self):
        """Initialize database tables."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS reviews (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    user_name TEXT NOT NULL,
                    guild_id TEXT NOT NULL,
                    rating INTEGER NOT NULL CHECK (rating >= 1 AND rating <= 5),
                    comment TEXT NOT NULL,
                    product TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_reviews_guild ON reviews (guild_id)")

            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS settings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    guild_id TEXT NOT NULL UNIQUE,
                    review_channel_id TEXT,
                    embed_color TEXT DEFAULT '{DEFAULT_EMBED_COLOR}',
                    embed_title TEXT DEFAULT '{DEFAULT_EMBED_TITLE}',
                    embed_description TEXT DEFAULT '{DEFAULT_EMBED_DESCRIPTION}',
                    products TEXT DEFAULT '[]',
                    admin_roles TEXT DEFAULT '[]',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
                )
            """)

            # Migrations for older databases
            self._migrate_settings_table(conn)

            logger.info(f"Database initialized: {self.db_path}")

    def _migrate_settings_table(self, conn):
        """Add missing columns to existing settings table."""
        existing = {row[1] for row in conn.execute("PRAGMA table_info(settings)").fetchall()}

        migrations = {
            "admin_roles": "ALTER TABLE settings ADD COLUMN admin_roles TEXT DEFAULT '[]'",
        }

        for col, sql in migrations.items():
            if col not in existing:
                try:
                    conn.execute(sql)
                    logger.info(f"Migrated: added '{col}' column to settings")
                except sqlite3.OperationalError:
                    pass

    # ── Settings ───────────────────────────────────────────────────

    def get_settings(self, guild_id: int) -> GuildSettings:
        """
        Get settings for a guild, creating the row with defaults on first access.
        Never raises: read failures degrade to defaults.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT * FROM settings WHERE guild_id = ? LIMIT 1", (str(guild_id),)
                ).fetchone()
                if row is None:
                    conn.execute(
                        "INSERT OR IGNORE INTO settings (guild_id) VALUES (?)", (str(guild_id),)
                    )
                    return GuildSettings(guild_id=guild_id)
                return self._row_to_settings(row)
        except sqlite3.Error as e:
            logger.error(f"Error getting settings for guild {guild_id}: {e}")
            return GuildSettings(guild_id=guild_id)

    def update_settings(self, guild_id: int, /, **updates) -> bool:
        """
        Upsert a subset of settings fields.

        Only names in UPDATABLE_SETTINGS are written; others are logged and
        ignored, guild_id included: the key itself is positional-only.
        Values are always bound as parameters.
        """
        rejected = sorted(set(updates) - set(UPDATABLE_SETTINGS))
        if rejected:
            logger.warning(f"Ignoring non-updatable settings fields for guild {guild_id}: {rejected}")

        fields = {k: self._encode_setting(k, v) for k, v in updates.items() if k in UPDATABLE_SETTINGS}
        if not fields:
            return False

        columns = list(fields.keys())
        placeholders = ", ".join("?" for _ in columns)
        set_clause = ", ".join(f"{col} = excluded.{col}" for col in columns)
        values = [str(guild_id)] + list(fields.values())

        try:
            with self._get_connection() as conn:
                conn.execute(
                    f"""INSERT INTO settings (guild_id, {", ".join(columns)})
                        VALUES (?, {placeholders})
                        ON CONFLICT (guild_id)
                        DO UPDATE SET {set_clause}, updated_at = CURRENT_TIMESTAMP""",
                    values
                )
            return True
        except sqlite3.Error as e:
            logger.error(f"Error updating settings for guild {guild_id}: {e}")
            return False

    @staticmethod
    def _encode_setting(column: str, value: Any) -> Optional[str]:
        if column in _JSON_LIST_COLUMNS:
            return json.dumps([str(v) for v in (value or [])])
        if value is None:
            return None
        return str(value)

    def _row_to_settings(self, row: sqlite3.Row) -> GuildSettings:
        """Convert database row to GuildSettings object."""
        channel_id = row["review_channel_id"]
        return GuildSettings(
            guild_id=int(row["guild_id"]),
            embed_color=row["embed_color"] or DEFAULT_EMBED_COLOR,
            embed_title=row["embed_title"] or DEFAULT_EMBED_TITLE,
            embed_description=row["embed_description"] or DEFAULT_EMBED_DESCRIPTION,
            review_channel_id=int(channel_id) if channel_id else None,
            products=self._decode_list(row["products"]),
            admin_roles=[int(r) for r in self._decode_list(row["admin_roles"]) if r.isdigit()],
        )

    @staticmethod
    def _decode_list(raw: Optional[str]) -> List[str]:
        try:
            data = json.loads(raw or "[]")
        except json.JSONDecodeError:
            return []
        if not isinstance(data, list):
            return []
        return [str(item) for item in data]

    # ── Reviews ────────────────────────────────────────────────────

    def save_review(self, user_id: int, user_name: str, guild_id: int,
                    rating: int, comment: str, product: str) -> Review:
        """
        Insert a completed review and return it with its id and timestamp.
        Raises StorageFailure on any database error.
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """INSERT INTO reviews (user_id, user_name, guild_id, rating, comment, product)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (str(user_id), user_name, str(guild_id), rating, comment, product)
                )
                row = conn.execute(
                    "SELECT * FROM reviews WHERE id = ?", (cursor.lastrowid,)
                ).fetchone()
                return self._row_to_review(row)
        except sqlite3.Error as e:
            logger.error(f"Error saving review for user {user_id} in guild {guild_id}: {e}")
            raise StorageFailure() from e

    def list_reviews(self, guild_id: int, limit: Optional[int] = None) -> List[Review]:
        """Reviews for a guild, newest first."""
        query = "SELECT * FROM reviews WHERE guild_id = ? ORDER BY id DESC"
        params: tuple = (str(guild_id),)
        if limit is not None:
            query += " LIMIT ?"
            params = params + (limit,)

        with self._get_connection() as conn:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_review(row) for row in rows]

    def _row_to_review(self, row: sqlite3.Row) -> Review:
        """Convert database row to Review object."""
        return Review(
            id=row["id"],
            user_id=int(row["user_id"]),
            user_name=row["user_name"],
            guild_id=int(row["guild_id"]),
            rating=row["rating"],
            comment=row["comment"],
            product=row["product"],
            created_at=str(row["created_at"] or ""),
        )


def init_database(db_path: str = DATABASE_FILE) -> Database:
    """Create a Database and make sure its tables exist."""
    db = Database(db_path)
    db.init()
    return db

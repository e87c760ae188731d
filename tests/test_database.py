"""Tests for the SQLite settings and review store."""

from __future__ import annotations

import sqlite3

import pytest

from reviewbot.domain.errors import StorageFailure
from reviewbot.domain.models import DEFAULT_EMBED_DESCRIPTION, DEFAULT_EMBED_TITLE
from reviewbot.infrastructure.persistence import Database

from conftest import CHANNEL, GUILD, OTHER_GUILD


def _save(db, guild_id=GUILD, rating=5, user_id=1, product="Banner"):
    return db.save_review(
        user_id=user_id,
        user_name="Alice",
        guild_id=guild_id,
        rating=rating,
        comment="Great service, very happy",
        product=product,
    )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class TestGetSettings:
    def test_defaults_for_new_guild(self, db):
        settings = db.get_settings(GUILD)
        assert settings.guild_id == GUILD
        assert settings.embed_color == "#3498db"
        assert settings.embed_title == DEFAULT_EMBED_TITLE
        assert settings.embed_description == DEFAULT_EMBED_DESCRIPTION
        assert settings.products == []
        assert settings.admin_roles == []
        assert settings.review_channel_id is None

    def test_row_created_lazily(self, db):
        db.get_settings(GUILD)
        with sqlite3.connect(db.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM settings").fetchone()[0]
        assert count == 1

    def test_read_failure_degrades_to_defaults(self, tmp_path):
        # Tables never created: every query fails
        db = Database(str(tmp_path / "empty.db"))
        settings = db.get_settings(GUILD)
        assert settings.embed_color == "#3498db"
        assert settings.products == []


class TestUpdateSettings:
    def test_partial_update_keeps_other_fields(self, db):
        assert db.update_settings(GUILD, embed_title="Rate us")
        assert db.update_settings(GUILD, embed_color="#ff0000")
        settings = db.get_settings(GUILD)
        assert settings.embed_title == "Rate us"
        assert settings.embed_color == "#ff0000"
        assert settings.embed_description == DEFAULT_EMBED_DESCRIPTION

    def test_lists_round_trip(self, db):
        db.update_settings(GUILD, products=["Logo", "Banner"], admin_roles=[987654321012])
        settings = db.get_settings(GUILD)
        assert settings.products == ["Logo", "Banner"]
        assert settings.admin_roles == [987654321012]

    def test_review_channel(self, db):
        db.update_settings(GUILD, review_channel_id=CHANNEL)
        assert db.get_settings(GUILD).review_channel_id == CHANNEL

    def test_disallowed_field_ignored(self, db):
        assert db.update_settings(GUILD, embed_title="Ok", guild_id="hijack") is True
        assert db.get_settings(GUILD).embed_title == "Ok"
        with sqlite3.connect(db.db_path) as conn:
            guild_ids = [r[0] for r in conn.execute("SELECT guild_id FROM settings")]
        assert guild_ids == [str(GUILD)]

    def test_guild_id_keyword_cannot_rekey_a_row(self, db):
        assert db.update_settings(GUILD, guild_id=OTHER_GUILD) is False
        with sqlite3.connect(db.db_path) as conn:
            count = conn.execute("SELECT COUNT(*) FROM settings").fetchone()[0]
        assert count == 0

    def test_only_disallowed_fields_is_rejected(self, db):
        assert db.update_settings(GUILD, **{"created_at": "x", "id = 1; DROP TABLE settings; --": 1}) is False
        with sqlite3.connect(db.db_path) as conn:
            tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert "settings" in tables

    def test_values_are_bound_not_interpolated(self, db):
        title = "Bob's \"review\" '); DROP TABLE reviews; --"
        assert db.update_settings(GUILD, embed_title=title)
        assert db.get_settings(GUILD).embed_title == title
        _save(db)  # reviews table still there

    def test_guilds_isolated(self, db):
        db.update_settings(GUILD, products=["Logo"])
        assert db.get_settings(OTHER_GUILD).products == []

    def test_write_failure_returns_false(self, tmp_path):
        db = Database(str(tmp_path / "empty.db"))
        assert db.update_settings(GUILD, embed_title="x") is False


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


class TestReviews:
    def test_save_assigns_id_and_timestamp(self, db):
        review = _save(db)
        assert review.id > 0
        assert review.created_at
        assert review.rating == 5
        assert review.comment == "Great service, very happy"
        assert review.guild_id == GUILD

    def test_ids_unique(self, db):
        assert _save(db).id != _save(db).id

    def test_rating_constraint_raises_storage_failure(self, db):
        with pytest.raises(StorageFailure):
            _save(db, rating=6)
        assert db.list_reviews(GUILD) == []

    def test_missing_tables_raise_storage_failure(self, tmp_path):
        db = Database(str(tmp_path / "empty.db"))
        with pytest.raises(StorageFailure):
            _save(db)

    def test_list_newest_first_and_by_guild(self, db):
        first = _save(db, product="Logo")
        second = _save(db, product="Banner")
        _save(db, guild_id=OTHER_GUILD)

        reviews = db.list_reviews(GUILD)
        assert [r.id for r in reviews] == [second.id, first.id]

    def test_list_limit(self, db):
        for _ in range(3):
            _save(db)
        assert len(db.list_reviews(GUILD, limit=2)) == 2


class TestInit:
    def test_init_is_idempotent(self, db):
        db.init()
        db.update_settings(GUILD, embed_title="Still here")
        db.init()
        assert db.get_settings(GUILD).embed_title == "Still here"

    def test_migrates_missing_admin_roles_column(self, tmp_path):
        path = str(tmp_path / "old.db")
        with sqlite3.connect(path) as conn:
            conn.execute("""
                CREATE TABLE settings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    guild_id TEXT NOT NULL UNIQUE,
                    review_channel_id TEXT,
                    embed_color TEXT DEFAULT '#3498db',
                    embed_title TEXT DEFAULT 'Review System',
                    embed_description TEXT DEFAULT 'Please complete all steps to submit your review.',
                    products TEXT DEFAULT '[]',
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
                )
            """)
        db = Database(path)
        db.init()
        db.update_settings(GUILD, admin_roles=[123456789])
        assert db.get_settings(GUILD).admin_roles == [123456789]

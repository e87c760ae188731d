"""Shared fixtures for the review bot tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from reviewbot.application.committer import SubmissionCommitter
from reviewbot.application.review_service import ReviewService
from reviewbot.application.sessions import SessionRegistry
from reviewbot.domain.flow import ReviewFlow
from reviewbot.infrastructure.persistence import Database

GUILD = 111111111111111111
OTHER_GUILD = 222222222222222222
ALICE = 333333333333333333
BOB = 444444444444444444
CHANNEL = 555555555555555555


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "reviews.db"))
    database.init()
    return database


@dataclass
class Harness:
    service: ReviewService
    registry: SessionRegistry
    db: Database
    notifier: Optional[AsyncMock]


def make_harness(db, notifier=None, store=None) -> Harness:
    registry = SessionRegistry()
    flow = ReviewFlow(comment_min_length=10, comment_max_length=1000)
    committer = SubmissionCommitter(store or db, notifier, registry, flow)
    service = ReviewService(registry, db, committer, flow)
    return Harness(service=service, registry=registry, db=db, notifier=notifier)


@pytest.fixture
def notifier():
    return AsyncMock()


@pytest.fixture
def harness(db, notifier):
    db.update_settings(GUILD, products=["Logo design", "Banner", "Website"], review_channel_id=CHANNEL)
    return make_harness(db, notifier)

"""Tests for the review flow state machine."""

from __future__ import annotations

import pytest

from reviewbot.domain.errors import CatalogEmpty, OutOfOrderStep, SessionExpired, ValidationFailed
from reviewbot.domain.flow import ReviewFlow, parse_product_value, product_value
from reviewbot.domain.models import ReviewSession, ReviewStep, pluralize_stars, preview, star_bar

CATALOG = ["Logo design", "Banner"]


def _session(**fields):
    return ReviewSession(guild_id=1, user_id=2, user_display_name="Alice", **fields)


@pytest.fixture
def flow():
    return ReviewFlow(comment_min_length=10, comment_max_length=50)


# ---------------------------------------------------------------------------
# Rating
# ---------------------------------------------------------------------------


class TestChooseRating:
    @pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
    def test_valid_rating_advances_to_comment(self, flow, rating):
        session = _session()
        assert flow.choose_rating(session, rating) == ReviewStep.COMMENT
        assert session.rating == rating
        assert session.step == ReviewStep.COMMENT

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_out_of_range_rating_rejected(self, flow, rating):
        session = _session()
        with pytest.raises(ValidationFailed):
            flow.choose_rating(session, rating)
        assert session.rating is None
        assert session.step == ReviewStep.RATING

    def test_rating_restarts_a_session_mid_flow(self, flow):
        session = _session(step=ReviewStep.PRODUCT, rating=2, comment="An older comment here")
        flow.choose_rating(session, 4)
        assert session.rating == 4
        assert session.comment is None
        assert session.product is None
        assert session.step == ReviewStep.COMMENT


# ---------------------------------------------------------------------------
# Comment
# ---------------------------------------------------------------------------


class TestSubmitComment:
    def test_comment_advances_to_product(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        assert flow.submit_comment(session, "Great service, very happy") == ReviewStep.PRODUCT
        assert session.comment == "Great service, very happy"

    def test_comment_stored_as_typed(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        text = "  Great service,\nvery happy  "
        flow.submit_comment(session, text)
        assert session.comment == text

    def test_length_measured_without_surrounding_whitespace(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        with pytest.raises(ValidationFailed, match="at least 10"):
            flow.submit_comment(session, "   short       ")

    def test_too_short_rejected(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        with pytest.raises(ValidationFailed, match="at least 10"):
            flow.submit_comment(session, "short")
        assert session.step == ReviewStep.COMMENT

    def test_whitespace_only_rejected(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        with pytest.raises(ValidationFailed):
            flow.submit_comment(session, " " * 20)

    def test_too_long_rejected(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=5)
        with pytest.raises(ValidationFailed, match="at most 50"):
            flow.submit_comment(session, "y" * 51)

    def test_wrong_step_rejected(self, flow):
        session = _session(step=ReviewStep.PRODUCT, rating=5, comment="Already commented on")
        with pytest.raises(OutOfOrderStep):
            flow.submit_comment(session, "A second comment attempt")
        assert session.comment == "Already commented on"

    def test_missing_rating_is_expired_not_defaulted(self, flow):
        session = _session(step=ReviewStep.COMMENT)
        with pytest.raises(SessionExpired):
            flow.submit_comment(session, "Great service, very happy")
        assert session.rating is None

    def test_unrated_session_at_rating_step_is_expired(self, flow):
        session = _session()
        with pytest.raises(SessionExpired):
            flow.submit_comment(session, "Great service, very happy")
        assert session.step == ReviewStep.RATING
        assert session.comment is None


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------


class TestSelectProduct:
    def _ready(self):
        return _session(step=ReviewStep.PRODUCT, rating=5, comment="Great service, very happy")

    def test_valid_index_completes(self, flow):
        session = self._ready()
        assert flow.select_product(session, CATALOG, 1) == ReviewStep.COMPLETE
        assert session.product == "Banner"

    @pytest.mark.parametrize("index", [-1, 2, 99])
    def test_index_out_of_range_leaves_session_untouched(self, flow, index):
        session = self._ready()
        with pytest.raises(ValidationFailed):
            flow.select_product(session, CATALOG, index)
        assert session.product is None
        assert session.step == ReviewStep.PRODUCT

    def test_empty_catalog(self, flow):
        session = self._ready()
        with pytest.raises(CatalogEmpty):
            flow.select_product(session, [], 0)
        assert session.step == ReviewStep.PRODUCT

    def test_catalog_empty_is_a_validation_failure(self):
        assert issubclass(CatalogEmpty, ValidationFailed)

    def test_wrong_step_rejected(self, flow):
        session = self._ready()
        flow.select_product(session, CATALOG, 0)
        with pytest.raises(OutOfOrderStep):
            flow.select_product(session, CATALOG, 1)
        assert session.product == "Logo design"

    def test_uncommented_session_is_expired(self, flow):
        session = _session(step=ReviewStep.COMMENT, rating=3)
        with pytest.raises(SessionExpired):
            flow.select_product(session, CATALOG, 0)
        assert session.product is None

    def test_rollback_returns_to_product(self, flow):
        session = self._ready()
        flow.select_product(session, CATALOG, 0)
        flow.rollback_product(session)
        assert session.step == ReviewStep.PRODUCT
        assert session.product is None
        assert session.comment == "Great service, very happy"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_product_value_round_trip(self):
        assert parse_product_value(product_value(7)) == 7

    @pytest.mark.parametrize("value", ["", "product_", "product_x", "rating_3"])
    def test_bad_product_value(self, value):
        with pytest.raises(ValidationFailed):
            parse_product_value(value)

    def test_pluralize(self):
        assert pluralize_stars(1) == "1 star"
        assert pluralize_stars(4) == "4 stars"

    def test_preview_truncates_long_text(self):
        assert preview("a" * 120, 100) == "a" * 100 + "..."
        assert preview("short", 100) == "short"

    def test_star_bar(self):
        assert star_bar(3) == "★★★☆☆"

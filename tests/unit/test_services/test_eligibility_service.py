"""Unit tests for food eligibility evaluation."""
import pytest

from festgate.core.cache import global_cache, stats_cache_key
from festgate.core.constants import DEFAULT_MEAL_TYPE
from festgate.db.models import FoodLog
from festgate.services import teams as team_service
from festgate.services.checkin import check_in
from festgate.services.eligibility import (
    IneligibleReason,
    check_eligibility,
    evaluate,
    record_food_scan,
)
from tests.utils import context_for


def food_rows(db_session):
    return db_session.query(FoodLog).order_by(FoodLog.id).all()


@pytest.fixture
def checked_in_member(db_session, event, member, staff_ctx):
    check_in(db_session, member.qr_token, event.id, staff_ctx)
    db_session.refresh(member)
    return member


@pytest.mark.unit
class TestEvaluate:
    """Decision rules, without any ledger writes."""

    def test_checked_in_member_is_eligible(self, db_session, event, team, checked_in_member):
        result = evaluate(db_session, event.canteen_token, checked_in_member.qr_token)

        assert result.eligible is True
        assert result.reason is None
        assert result.member.id == checked_in_member.id
        assert result.team.id == team.id
        assert result.event.id == event.id
        assert result.check_in_time == checked_in_member.check_in_time
        assert result.message == "You are eligible for food!"

    def test_not_checked_in(self, db_session, event, member):
        """Registered but not yet through the gate."""
        result = evaluate(db_session, event.canteen_token, member.qr_token)

        assert result.eligible is False
        assert result.reason is IneligibleReason.NOT_CHECKED_IN
        assert result.member.id == member.id
        assert result.check_in_time is None

    def test_invalid_canteen_token(self, db_session, member):
        result = evaluate(db_session, "EVENT:NOPE:CANTEEN:0000", member.qr_token)

        assert result.reason is IneligibleReason.INVALID_CANTEEN_TOKEN
        assert result.event is None
        assert result.member is None

    def test_member_token_in_canteen_slot(self, db_session, member):
        """A badge scanned where the canteen poster was expected."""
        result = evaluate(db_session, member.qr_token, member.qr_token)

        assert result.reason is IneligibleReason.INVALID_CANTEEN_TOKEN

    def test_invalid_member_token(self, db_session, event):
        result = evaluate(db_session, event.canteen_token, "UNKNOWN_T1_M1_deadbeef")

        assert result.reason is IneligibleReason.INVALID_MEMBER_TOKEN
        assert result.event.id == event.id
        assert result.member is None

    def test_canteen_token_in_member_slot(self, db_session, event):
        result = evaluate(db_session, event.canteen_token, event.canteen_token)

        assert result.reason is IneligibleReason.INVALID_MEMBER_TOKEN

    def test_wrong_event(self, db_session, event, checked_in_member, make_event):
        """Checked in at one event does not feed you at another."""
        other = make_event(slug="robowars")

        result = evaluate(db_session, other.canteen_token, checked_in_member.qr_token)

        assert result.eligible is False
        assert result.reason is IneligibleReason.WRONG_EVENT
        assert result.event.id == other.id

    def test_inactive_event(self, db_session, event, checked_in_member):
        event.is_active = False
        db_session.commit()

        result = evaluate(db_session, event.canteen_token, checked_in_member.qr_token)

        assert result.reason is IneligibleReason.EVENT_INACTIVE

    def test_payment_is_not_consulted(self, db_session, event, team, checked_in_member, organizer_ctx):
        """Eligibility depends on attendance alone."""
        team_service.update_team(db_session, team.id, organizer_ctx, payment_status="failed")

        result = evaluate(db_session, event.canteen_token, checked_in_member.qr_token)

        assert result.eligible is True

    def test_deactivated_team_member_is_invalid(self, db_session, event, team, checked_in_member, organizer_ctx):
        team_service.update_team(db_session, team.id, organizer_ctx, is_active=False)

        result = evaluate(db_session, event.canteen_token, checked_in_member.qr_token)

        assert result.reason is IneligibleReason.INVALID_MEMBER_TOKEN


@pytest.mark.unit
class TestCheckEligibility:
    """Participant-side queries: repeatable, read-only apart from the ledger."""

    def test_eligibility_follows_check_in(self, db_session, event, member, staff_ctx, lead_user):
        """Not eligible before the gate scan, eligible right after it."""
        lead_ctx = context_for(lead_user)
        before = check_eligibility(db_session, event.canteen_token, member.qr_token, lead_ctx)
        assert before.eligible is False
        assert before.reason is IneligibleReason.NOT_CHECKED_IN

        check_in(db_session, member.qr_token, event.id, staff_ctx)

        after = check_eligibility(db_session, event.canteen_token, member.qr_token, lead_ctx)
        assert after.eligible is True

    def test_repeated_checks_never_mutate_member(self, db_session, event, checked_in_member, staff_ctx):
        """Unlimited meals: every call is eligible and member state is untouched."""
        time_before = checked_in_member.check_in_time

        results = [
            check_eligibility(db_session, event.canteen_token, checked_in_member.qr_token, staff_ctx)
            for _ in range(5)
        ]

        assert all(r.eligible for r in results)
        db_session.refresh(checked_in_member)
        assert checked_in_member.is_checked_in is True
        assert checked_in_member.check_in_time == time_before

    def test_one_ledger_row_per_call(self, db_session, event, member, checked_in_member, staff_ctx):
        check_eligibility(db_session, event.canteen_token, member.qr_token, staff_ctx)
        check_eligibility(db_session, "bad-canteen", member.qr_token, staff_ctx)

        rows = food_rows(db_session)
        assert len(rows) == 2
        eligible_row, rejected_row = rows

        assert eligible_row.eligible is True
        assert eligible_row.event_id == event.id
        assert eligible_row.member_id == member.id
        assert eligible_row.team_name == "Byte Me"
        assert eligible_row.event_canteen_qr == event.canteen_token
        assert eligible_row.member_qr_token == member.qr_token
        assert eligible_row.meal_type is None

        assert rejected_row.eligible is False
        assert rejected_row.reason == "INVALID_CANTEEN_TOKEN"
        assert rejected_row.event_id is None
        assert rejected_row.member_name == "Unknown"

    def test_eligible_check_invalidates_stats(self, db_session, event, checked_in_member, staff_ctx):
        global_cache.set(stats_cache_key(event.id), {"eligible_food_checks": 0})

        check_eligibility(db_session, event.canteen_token, checked_in_member.qr_token, staff_ctx)

        assert global_cache.get(stats_cache_key(event.id)) is None


@pytest.mark.unit
class TestRecordFoodScan:
    """Counter-side scans record the meal served."""

    def test_meal_type_is_recorded(self, db_session, event, checked_in_member, staff_ctx):
        result = record_food_scan(
            db_session, event.canteen_token, checked_in_member.qr_token, staff_ctx, meal_type="lunch"
        )

        assert result.eligible is True
        row = food_rows(db_session)[0]
        assert row.meal_type == "lunch"
        assert row.scanned_by_name == "Gate Staff"

    def test_meal_type_defaults(self, db_session, event, checked_in_member, staff_ctx):
        record_food_scan(db_session, event.canteen_token, checked_in_member.qr_token, staff_ctx)

        assert food_rows(db_session)[0].meal_type == DEFAULT_MEAL_TYPE

    def test_ineligible_scan_is_logged_with_reason(self, db_session, event, member, staff_ctx):
        result = record_food_scan(db_session, event.canteen_token, member.qr_token, staff_ctx, meal_type="dinner")

        assert result.eligible is False
        row = food_rows(db_session)[0]
        assert row.eligible is False
        assert row.reason == "NOT_CHECKED_IN"
        assert row.meal_type == "dinner"

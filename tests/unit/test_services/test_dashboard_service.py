"""Unit tests for dashboard statistics and team listings."""
import pytest
from sqlalchemy import update

from festgate.core.cache import global_cache, stats_cache_key
from festgate.core.exceptions import NotFoundError, ValidationError
from festgate.db.models import Member
from festgate.services import dashboard
from festgate.services import teams as team_service
from festgate.services.checkin import check_in
from festgate.services.eligibility import check_eligibility, record_food_scan


@pytest.mark.unit
class TestStats:
    """Per-event statistics snapshots."""

    def test_empty_event(self, db_session, event):
        stats = dashboard.get_stats(db_session, event.id)

        assert stats["total_teams"] == 0
        assert stats["total_members"] == 0
        assert stats["total_checked_in"] == 0
        assert stats["check_in_percentage"] == 0.0
        assert stats["event"]["slug"] == "hackfest"

    def test_counts_after_scans(self, db_session, event, team, make_team, staff_ctx):
        """Repeat scans and ineligible checks do not inflate the numbers."""
        make_team(event, members=3)
        first, second = team.members

        check_in(db_session, first.qr_token, event.id, staff_ctx)
        check_in(db_session, first.qr_token, event.id, staff_ctx)
        record_food_scan(db_session, event.canteen_token, first.qr_token, staff_ctx, meal_type="lunch")
        check_eligibility(db_session, event.canteen_token, first.qr_token, staff_ctx)
        record_food_scan(db_session, event.canteen_token, second.qr_token, staff_ctx)  # not checked in

        stats = dashboard.get_stats(db_session, event.id)

        assert stats["total_teams"] == 2
        assert stats["total_members"] == 5
        assert stats["total_checked_in"] == 1
        assert stats["pending_check_in"] == 4
        assert stats["total_food_distributed"] == 1
        assert stats["eligible_food_checks"] == 1
        assert stats["check_in_percentage"] == 20.0

    def test_scoped_to_event(self, db_session, event, team, make_event, make_team, staff_ctx):
        other = make_event(slug="robowars")
        other_team = make_team(other, members=1)
        check_in(db_session, other_team.members[0].qr_token, other.id, staff_ctx)

        stats = dashboard.get_stats(db_session, event.id)
        overall = dashboard.get_stats(db_session)

        assert stats["total_checked_in"] == 0
        assert stats["total_members"] == 2
        assert overall["total_members"] == 3
        assert overall["total_checked_in"] == 1
        assert "event" not in overall

    def test_inactive_teams_excluded(self, db_session, event, team, organizer_ctx):
        team_service.update_team(db_session, team.id, organizer_ctx, is_active=False)

        stats = dashboard.get_stats(db_session, event.id)

        assert stats["total_teams"] == 0
        assert stats["total_members"] == 0

    def test_snapshot_is_cached(self, db_session, event, team):
        """Changes that bypass the scan flows show up only after the TTL or an invalidation."""
        dashboard.get_stats(db_session, event.id)
        db_session.execute(update(Member).values(is_checked_in=True))
        db_session.commit()

        assert dashboard.get_stats(db_session, event.id)["total_checked_in"] == 0

        global_cache.invalidate(stats_cache_key(event.id))
        assert dashboard.get_stats(db_session, event.id)["total_checked_in"] == 2

    def test_check_in_refreshes_snapshot(self, db_session, event, member, staff_ctx):
        dashboard.get_stats(db_session, event.id)

        check_in(db_session, member.qr_token, event.id, staff_ctx)

        assert dashboard.get_stats(db_session, event.id)["total_checked_in"] == 1

    def test_unknown_event(self, db_session):
        with pytest.raises(NotFoundError):
            dashboard.get_stats(db_session, 999)


@pytest.mark.unit
class TestListTeams:
    """Filtered, paged team listings."""

    @pytest.fixture
    def teams(self, db_session, event, make_team, staff_ctx, organizer_ctx):
        complete = make_team(event, members=2, team_name="Alpha Coders")
        partial = make_team(event, members=2, team_name="Beta Testers")
        none = make_team(event, members=1, team_name="Gamma Rays")

        for m in complete.members:
            check_in(db_session, m.qr_token, event.id, staff_ctx)
        check_in(db_session, partial.members[0].qr_token, event.id, staff_ctx)
        team_service.update_team(db_session, complete.id, organizer_ctx, payment_status="completed")
        return complete, partial, none

    def test_counts_per_team(self, db_session, event, teams):
        items, total = dashboard.list_teams(db_session, event.id)

        assert total == 3
        counts = {i["team"].team_name: (i["member_count"], i["checked_in_count"]) for i in items}
        assert counts == {"Alpha Coders": (2, 2), "Beta Testers": (2, 1), "Gamma Rays": (1, 0)}

    def test_newest_first(self, db_session, event, teams):
        items, _ = dashboard.list_teams(db_session, event.id)

        assert [i["team"].team_name for i in items] == ["Gamma Rays", "Beta Testers", "Alpha Coders"]

    @pytest.mark.parametrize("status, expected", [
        ("completed", ["Alpha Coders"]),
        ("partial", ["Beta Testers"]),
        ("none", ["Gamma Rays"]),
    ])
    def test_check_in_status_filter(self, db_session, event, teams, status, expected):
        items, total = dashboard.list_teams(db_session, event.id, check_in_status=status)

        assert total == len(expected)
        assert [i["team"].team_name for i in items] == expected

    def test_payment_and_search_filters(self, db_session, event, teams):
        paid, _ = dashboard.list_teams(db_session, event.id, payment_status="completed")
        found, _ = dashboard.list_teams(db_session, event.id, search="test")

        assert [i["team"].team_name for i in paid] == ["Alpha Coders"]
        assert [i["team"].team_name for i in found] == ["Beta Testers"]

    def test_pagination(self, db_session, event, teams):
        items, total = dashboard.list_teams(db_session, event.id, page=2, limit=2)

        assert total == 3
        assert [i["team"].team_name for i in items] == ["Alpha Coders"]

    @pytest.mark.parametrize("kwargs", [{"payment_status": "refunded"}, {"check_in_status": "some"}])
    def test_invalid_filters(self, db_session, event, kwargs):
        with pytest.raises(ValidationError):
            dashboard.list_teams(db_session, event.id, **kwargs)

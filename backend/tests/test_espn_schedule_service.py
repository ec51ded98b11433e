"""
Tests for the ESPN weekly schedule gateway
"""
import asyncio

import httpx

from gamewatch.services.espn_schedule_service import ESPNScheduleService, parse_event, parse_kickoff

BASE = "https://espn.test/nfl"
LISTING = "/nfl/seasons/2025/types/2/weeks/7/events"


def event(event_id, away_id, home_id, date="2025-10-19T17:00Z", name=None):
    body = {
        "id": event_id,
        "date": date,
        "competitions": [
            {
                "competitors": [
                    {"id": str(home_id), "homeAway": "home"},
                    {"id": str(away_id), "homeAway": "away"},
                ],
                "status": {"type": {"name": "STATUS_SCHEDULED"}},
            }
        ],
    }
    if name:
        body["name"] = name
    return body


def make_service(routes):
    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={})
        if isinstance(route, Exception):
            raise route
        return httpx.Response(200, json=route)

    return ESPNScheduleService(base_url=BASE, transport=httpx.MockTransport(handler))


def listing(*event_ids):
    return {"items": [{"$ref": f"http://espn.test/nfl/events/{i}?lang=en"} for i in event_ids]}


class TestParsing:
    def test_kickoff_epoch_ms(self):
        assert parse_kickoff("2025-10-19T17:00Z") == 1760893200000

    def test_missing_kickoff(self):
        assert parse_kickoff(None) == 0
        assert parse_kickoff("not a date") == 0

    def test_event_teams_and_defaults(self):
        game = parse_event(event("1", away_id=2, home_id=12), 2025, 7)
        assert game.away_team == "BUF"
        assert game.home_team == "KC"
        assert game.name == "BUF @ KC"
        assert game.status == "STATUS_SCHEDULED"

    def test_unknown_team_id_is_blank(self):
        game = parse_event(event("1", away_id=99, home_id=12), 2025, 7)
        assert game.away_team == ""
        assert game.home_team == "KC"

    def test_event_without_competitions(self):
        assert parse_event({"id": "1"}, 2025, 7) is None


class TestGetWeekGames:
    def test_fetches_every_event(self):
        service = make_service(
            {
                LISTING: listing("101", "102"),
                "/nfl/events/101": event("101", 2, 12, name="Buffalo Bills at Kansas City Chiefs"),
                "/nfl/events/102": event("102", 16, 25),
            }
        )

        games = asyncio.run(service.get_week_games(2025, 7))

        assert [(g.away_team, g.home_team) for g in games] == [("BUF", "KC"), ("MIN", "SF")]
        assert games[0].name == "Buffalo Bills at Kansas City Chiefs"
        assert all(g.week == 7 and g.season == 2025 for g in games)

    def test_failed_event_is_dropped(self):
        service = make_service(
            {
                LISTING: listing("101", "102"),
                "/nfl/events/101": event("101", 2, 12),
                "/nfl/events/102": httpx.ConnectError("down"),
            }
        )
        games = asyncio.run(service.get_week_games(2025, 7))
        assert len(games) == 1

    def test_empty_listing(self):
        service = make_service({LISTING: {"items": []}})
        assert asyncio.run(service.get_week_games(2025, 7)) == []

    def test_listing_failure_is_empty(self):
        assert asyncio.run(make_service({}).get_week_games(2025, 7)) == []

    def test_null_ref_is_skipped(self):
        service = make_service(
            {
                LISTING: {"items": [{"$ref": None}, "junk", {"$ref": "http://espn.test/nfl/events/101"}]},
                "/nfl/events/101": event("101", 2, 12),
            }
        )
        games = asyncio.run(service.get_week_games(2025, 7))
        assert [(g.away_team, g.home_team) for g in games] == [("BUF", "KC")]

    def test_malformed_event_is_dropped(self):
        broken = event("102", 16, 25)
        broken["competitions"][0]["competitors"] = [None]
        service = make_service(
            {
                LISTING: listing("101", "102", "103"),
                "/nfl/events/101": event("101", 2, 12),
                "/nfl/events/102": broken,
                "/nfl/events/103": ["not", "an", "event"],
            }
        )
        games = asyncio.run(service.get_week_games(2025, 7))
        assert [g.home_team for g in games] == ["KC"]

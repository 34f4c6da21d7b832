"""Tests for the REST API over an in-memory repository and a fake provider."""

from __future__ import annotations

import pytest
from conftest import FakeOddsClient
from fastapi.testclient import TestClient

from api.main import create_app
from api.state import AppState
from surebet.betting.arbitrage_scanner import ArbitrageScanner
from surebet.config.settings import Settings
from surebet.data.sources.base import ConfigurationError


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        scheduler={"sports": ["basketball_nba", "soccer_epl"], "inter_sport_delay_seconds": 0},
    )


@pytest.fixture
def api(settings, repository, fake_client):
    state = AppState(
        settings=settings,
        repository=repository,
        client=fake_client,
        scanner=ArbitrageScanner(),
        enable_scheduler=False,
    )
    with TestClient(create_app(state)) as client:
        yield client


def sync(api, sport_key: str) -> dict:
    response = api.post("/api/sync-odds", json={"sportKey": sport_key})
    assert response.status_code == 200
    return response.json()


def game_id_for(api, sport: str) -> int:
    return api.get("/api/games", params={"sport": sport}).json()[0]["id"]


class TestSyncOdds:
    def test_sync_named_sport(self, api):
        body = sync(api, "soccer_epl")

        assert body == {
            "success": True,
            "gamesProcessed": 1,
            "oddsProcessed": 3,
            "arbitragesLogged": 6,
            "sportKey": "soccer_epl",
        }

    def test_empty_body_uses_default_sport(self, api, fake_client):
        response = api.post("/api/sync-odds")

        assert response.status_code == 200
        assert response.json()["sportKey"] == "basketball_nba"
        assert fake_client.calls == ["basketball_nba"]

    def test_upstream_status_is_forwarded(self, api, fake_client, upstream_error):
        fake_client.failing["basketball_nba"] = upstream_error

        response = api.post("/api/sync-odds", json={"sportKey": "basketball_nba"})

        assert response.status_code == 503
        assert "503" in response.json()["error"]

    def test_missing_configuration_is_server_error(self, api, fake_client):
        fake_client.failing["basketball_nba"] = ConfigurationError("odds_api", "ODDS_API_KEY missing")

        response = api.post("/api/sync-odds", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "ODDS_API_KEY missing"}

    def test_unexpected_failure_is_server_error(self, api, fake_client):
        fake_client.failing["basketball_nba"] = RuntimeError("boom")

        response = api.post("/api/sync-odds", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}

    def test_sync_all(self, api):
        response = api.post("/api/sync-all")

        body = response.json()
        assert response.status_code == 200
        assert body["sportsProcessed"] == 2
        assert (body["totalGames"], body["totalOdds"], body["totalArbitrages"]) == (2, 5, 7)
        assert body["failedSports"] == []

        runs = api.get("/api/sync-runs").json()
        assert len(runs) == 1
        assert runs[0]["sportsSynced"] == 2

    def test_sync_all_without_settings_reports_error_body(self, api):
        api.app.state.app_state.settings = None

        response = api.post("/api/sync-all")

        assert response.status_code == 500
        assert "error" in response.json()


class TestSyncStatus:
    def test_before_first_sync(self, api):
        response = api.get("/api/sync-status")

        assert response.json() == {"lastRunAt": None, "sportKey": "basketball_nba"}

    def test_after_sync(self, api):
        sync(api, "soccer_epl")

        body = api.get("/api/sync-status").json()
        assert body["sportKey"] == "soccer_epl"
        assert body["lastRunAt"] is not None


class TestGames:
    def test_list_and_filter(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")

        assert len(api.get("/api/games").json()) == 2
        soccer = api.get("/api/games", params={"sport": "Soccer"}).json()
        assert [g["home_team"] for g in soccer] == ["Arsenal"]
        assert [o["bookmaker"] for o in soccer[0]["odds"]] == ["bet365", "unibet", "williamhill"]

    def test_missing_game(self, api):
        assert api.get("/api/games/999").status_code == 404

    def test_two_way_surebet(self, api):
        sync(api, "basketball_nba")
        game_id = game_id_for(api, "basketball_nba")

        body = api.get(f"/api/games/{game_id}/surebet").json()

        assert body["has_arbitrage"] is True
        assert body["is_three_way"] is False
        assert body["combo"] == "home_houseA_away_houseB"
        assert body["total_investment"] == 500
        assert body["payout"] == pytest.approx(518.67, abs=0.01)
        assert [(leg["outcome"], leg["bookmaker"]) for leg in body["legs"]] == [
            ("home", "bet365"),
            ("away", "pinnacle"),
        ]
        assert body["legs"][0]["stake"] == pytest.approx(246.99, abs=0.01)

    def test_three_way_surebet(self, api):
        sync(api, "soccer_epl")
        game_id = game_id_for(api, "soccer_epl")

        body = api.get(
            f"/api/games/{game_id}/surebet",
            params={"house_a": "bet365", "house_b": "unibet", "total": 300},
        ).json()

        assert body["is_three_way"] is True
        assert body["arb_index"] == pytest.approx(0.9357, abs=1e-4)
        assert [(leg["outcome"], leg["bookmaker"], leg["odd"]) for leg in body["legs"]] == [
            ("home", "bet365", 2.50),
            ("draw", "unibet", 4.00),
            ("away", "unibet", 3.50),
        ]
        assert sum(leg["stake"] for leg in body["legs"]) == pytest.approx(300)

    def test_unknown_bookmaker(self, api):
        sync(api, "basketball_nba")
        game_id = game_id_for(api, "basketball_nba")

        response = api.get(f"/api/games/{game_id}/surebet", params={"house_a": "nobody"})

        assert response.status_code == 404

    def test_surebet_for_missing_game(self, api):
        assert api.get("/api/games/999/surebet").status_code == 404


class TestSurebetList:
    def test_default_pairs_keep_arbitrage_games(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")

        body = api.get("/api/surebets").json()

        assert [(s["home_team"], s["is_three_way"]) for s in body] == [
            ("Boston Celtics", False),
            ("Arsenal", True),
        ]
        assert all(s["has_arbitrage"] for s in body)

    def test_selected_pair_filters_games(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")
        pair = {"house_a": "bet365", "house_b": "williamhill"}

        assert api.get("/api/surebets", params=pair).json() == []

        everything = api.get("/api/surebets", params={**pair, "only_arbitrage": False}).json()
        assert len(everything) == 2
        nba = next(s for s in everything if s["home_team"] == "Boston Celtics")
        assert nba["combo"] is None
        assert nba["legs"] == []


class TestAnalytics:
    def test_bookmaker_stats(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")

        stats = api.get("/api/bookmaker-stats").json()

        assert [(s["bookmaker"], s["best_total"]) for s in stats] == [
            ("bet365", 2),
            ("pinnacle", 1),
            ("unibet", 1),
            ("williamhill", 0),
        ]
        assert stats[0]["avg_home_odd"] == pytest.approx((2.10 + 2.50) / 2)

        soccer = api.get("/api/bookmaker-stats", params={"sport": "Soccer", "limit": 1}).json()
        assert [s["bookmaker"] for s in soccer] == ["bet365"]

    def test_bookmakers(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")

        assert api.get("/api/bookmakers").json() == ["bet365", "pinnacle", "unibet", "williamhill"]
        assert api.get("/api/bookmakers", params={"sport": "basketball_nba"}).json() == [
            "bet365",
            "pinnacle",
        ]

    def test_accumulator(self, api):
        body = api.post("/api/accumulator", json={"odds": [2.0, 1.5], "stake": 10}).json()

        assert body["legs"] == 2
        assert body["combined_odds"] == pytest.approx(3.0)
        assert body["joint_probability"] == pytest.approx(100 / 3)
        assert body["potential_return"] == pytest.approx(30.0)

    @pytest.mark.parametrize("odds", [[], [2.0, 1.0]])
    def test_accumulator_rejects_unusable_legs(self, api, odds):
        assert api.post("/api/accumulator", json={"odds": odds}).status_code == 422


class TestArbitrageLog:
    def test_lists_logged_opportunities(self, api):
        sync(api, "basketball_nba")
        sync(api, "soccer_epl")

        assert len(api.get("/api/arbitrage-log").json()) == 7
        nba = api.get("/api/arbitrage-log", params={"sport": "Basketball"}).json()
        assert [(log["bookmaker_a"], log["bookmaker_b"]) for log in nba] == [("bet365", "pinnacle")]

    def test_inverted_range(self, api):
        response = api.get(
            "/api/arbitrage-log",
            params={"start_date": "2026-10-20T00:00:00Z", "end_date": "2026-10-19T00:00:00Z"},
        )

        assert response.status_code == 400


class TestRiskPicks:
    def test_moderate_pick(self, api):
        sync(api, "basketball_nba")

        picks = api.get("/api/risk-picks", params={"level": "moderate", "total": 200}).json()

        assert len(picks) == 1
        assert (picks[0]["outcome"], picks[0]["odd"], picks[0]["bookmaker"]) == ("home", 2.10, "bet365")
        assert picks[0]["stake"] == pytest.approx(200)

    def test_invalid_level(self, api):
        assert api.get("/api/risk-picks", params={"level": "reckless"}).status_code == 422


class TestOperations:
    def test_health(self, api):
        body = api.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["components"]["repository"] is True
        assert body["components"]["scheduler"] is False

    def test_jobs_without_scheduler(self, api):
        assert api.get("/api/jobs/status").json() == {"scheduler_running": False, "jobs": []}
        assert api.post("/api/jobs/sync_all_sports/trigger").status_code == 503

    def test_job_control_with_scheduler(self, settings, repository, fake_client):
        state = AppState(settings=settings, repository=repository, client=fake_client)

        with TestClient(create_app(state)) as api:
            status = api.get("/api/jobs/status").json()
            assert status["scheduler_running"] is True
            assert {job["job_id"] for job in status["jobs"]} == {"sync_all_sports", "health_check"}

            response = api.post("/api/jobs/health_check/pause")
            assert response.status_code == 200
            assert response.json()["action"] == "pause"

            jobs = {job["job_id"]: job for job in api.get("/api/jobs/status").json()["jobs"]}
            assert jobs["health_check"]["next_run"] is None

            assert api.post("/api/jobs/unknown/trigger").status_code == 400
            assert api.post("/api/jobs/health_check/explode").status_code == 422

        assert not state.scheduler.is_running

    def test_shutdown_closes_client(self, settings, repository):
        client = FakeOddsClient()
        state = AppState(settings=settings, repository=repository, client=client, enable_scheduler=False)

        with TestClient(create_app(state)):
            pass

        assert client.closed

"""
Tests for the JSON API: participant selection, phase gating on writes,
and the full predict -> pick -> result -> score flow.
"""

from sportsbook import db
from sportsbook.models import Pick, Player, Prediction, Result, Score


class TestSession:
    def test_no_participant_selected(self, client, players):
        response = client.get("/api/session")

        assert response.status_code == 200
        assert response.get_json() == {"participant": None}

    def test_select_participant(self, client, players):
        response = client.post("/api/session", json={"participant": " Andy "})

        assert response.status_code == 200
        assert client.get("/api/session").get_json() == {"participant": "andy"}

    def test_non_bettor_cannot_be_selected(self, client, players):
        response = client.post("/api/session", json={"participant": "tyler"})

        assert response.status_code == 400

    def test_unknown_participant(self, client, players):
        response = client.post("/api/session", json={"participant": "nobody"})

        assert response.status_code == 400

    def test_missing_body(self, client, players):
        response = client.post("/api/session", data="not json")

        assert response.status_code == 400

    def test_clear_participant(self, as_andy):
        as_andy.delete("/api/session")

        assert as_andy.get("/api/session").get_json() == {"participant": None}

    def test_writes_require_participant(self, client, open_round):
        response = client.put("/api/rounds/1/predictions", json={"predictions": []})

        assert response.status_code == 401


class TestRounds:
    def test_players_catalogue(self, client, players):
        data = client.get("/api/players").get_json()

        assert [p["name"] for p in data["players"]] == ["andy", "josh", "ronit", "tyler"]
        assert "pts" in data["stats"]
        assert "team_mvp" in data["props"]

    def test_list_rounds_with_phase(self, client, open_round, locked_round):
        data = client.get("/api/rounds").get_json()

        assert [(r["number"], r["phase"]) for r in data] == [(1, "open"), (2, "locked")]
        assert data[1]["time_remaining"] == "Locked"

    def test_round_detail_includes_roster(self, client, open_round):
        data = client.get("/api/rounds/1").get_json()

        assert data["roster"] == ["andy", "josh", "ronit", "tyler"]

    def test_unknown_round(self, client, players):
        response = client.get("/api/rounds/99")

        assert response.status_code == 404
        assert response.get_json() == {"error": "Resource not found"}

    def test_current_round_without_schedule(self, client, players):
        assert client.get("/api/rounds/current").status_code == 404


class TestPredictions:
    def test_save_predictions_publishes_lines(self, as_andy, open_round):
        response = as_andy.put(
            "/api/rounds/1/predictions",
            json={
                "predictions": [
                    {"player": "josh", "stat": "pts", "value": 10},
                    {"player": "tyler", "stat": "ast", "value": 2.5},
                ]
            },
        )

        assert response.status_code == 200
        assert response.get_json() == {"saved": 2, "lines_published": 2}

        lines = as_andy.get("/api/rounds/1/lines").get_json()["lines"]
        assert {(l["player"], l["stat"]): l["value"] for l in lines} == {
            ("josh", "pts"): 10,
            ("tyler", "ast"): 3,
        }

    def test_resubmitting_replaces_predictions(self, as_andy, open_round):
        url = "/api/rounds/1/predictions"
        as_andy.put(url, json={"predictions": [{"player": "josh", "stat": "pts", "value": 10}]})
        as_andy.put(url, json={"predictions": [{"player": "josh", "stat": "ast", "value": 4}]})

        own = as_andy.get(url).get_json()["predictions"]

        assert [(p["player"], p["stat"]) for p in own] == [("josh", "ast")]
        assert Prediction.query.count() == 1
        assert open_round.lines.count() == 1

    def test_invalid_entries_are_rejected(self, as_andy, open_round):
        response = as_andy.put(
            "/api/rounds/1/predictions",
            json={
                "predictions": [
                    {"player": "josh", "stat": "pts", "value": 10},
                    {"player": "nobody", "stat": "pts", "value": 10},
                    {"player": "josh", "stat": "dunks", "value": 1},
                    {"player": "josh", "stat": "ast", "value": -1},
                ]
            },
        )

        assert response.status_code == 400
        assert set(response.get_json()["details"]) == {"1", "2", "3"}
        assert Prediction.query.count() == 0

    def test_missing_predictions_key_keeps_stored_predictions(self, as_andy, open_round):
        url = "/api/rounds/1/predictions"
        as_andy.put(url, json={"predictions": [{"player": "josh", "stat": "pts", "value": 10}]})

        response = as_andy.put(url, json={"picks": []})

        assert response.status_code == 400
        assert Prediction.query.count() == 1
        assert open_round.lines.count() == 1

    def test_empty_list_withdraws_predictions(self, as_andy, open_round):
        url = "/api/rounds/1/predictions"
        as_andy.put(url, json={"predictions": [{"player": "josh", "stat": "pts", "value": 10}]})

        response = as_andy.put(url, json={"predictions": []})

        assert response.status_code == 200
        assert Prediction.query.count() == 0
        assert open_round.lines.count() == 0

    def test_locked_round_rejects_predictions(self, as_andy, locked_round):
        response = as_andy.put(
            "/api/rounds/2/predictions",
            json={"predictions": [{"player": "josh", "stat": "pts", "value": 10}]},
        )

        assert response.status_code == 409


class TestPicks:
    def _publish(self, client):
        client.put(
            "/api/rounds/1/predictions",
            json={"predictions": [{"player": "josh", "stat": "pts", "value": 12}]},
        )

    def test_save_and_read_picks(self, as_andy, open_round):
        self._publish(as_andy)

        response = as_andy.put(
            "/api/rounds/1/picks",
            json={
                "picks": [
                    {"player": "josh", "stat": "pts", "picked": True},
                    {"player": "ronit", "stat": "ast", "picked": False},
                ],
                "prop_picks": [{"prop_type": "team_mvp", "player_picked": "tyler"}],
            },
        )

        assert response.status_code == 200
        assert response.get_json() == {"picks": 2, "prop_picks": 1}

        data = as_andy.get("/api/rounds/1/picks").get_json()
        picked = {(p["player"], p["stat"]): p["picked"] for p in data["picks"]}
        assert picked == {("josh", "pts"): True, ("ronit", "ast"): False}
        assert data["prop_picks"][0]["player_picked"] == "tyler"
        assert data["suggestions"] == [{"player": "josh", "stat": "pts", "suggested": True}]

    def test_picks_are_upserted(self, as_andy, open_round):
        url = "/api/rounds/1/picks"
        as_andy.put(url, json={"picks": [{"player": "josh", "stat": "pts", "picked": True}]})
        as_andy.put(url, json={"picks": [{"player": "josh", "stat": "pts", "picked": False}]})

        assert Pick.query.count() == 1
        assert Pick.query.one().picked is False

    def test_suggestions_are_not_stored(self, as_andy, open_round):
        self._publish(as_andy)

        as_andy.get("/api/rounds/1/picks")

        assert Pick.query.count() == 0

    def test_locked_round_rejects_picks(self, as_andy, locked_round):
        response = as_andy.put(
            "/api/rounds/2/picks",
            json={"picks": [{"player": "josh", "stat": "pts", "picked": True}]},
        )

        assert response.status_code == 409


class TestResultsAndScores:
    def test_results_wait_for_lock(self, as_andy, open_round):
        response = as_andy.put("/api/rounds/1/results", json={"results": []})

        assert response.status_code == 409
        assert as_andy.post("/api/rounds/1/scores").status_code == 409

    def test_unknown_prop_winner(self, as_andy, locked_round):
        response = as_andy.put(
            "/api/rounds/2/results",
            json={"prop_results": [{"prop_type": "team_mvp", "winners": ["nobody"]}]},
        )

        assert response.status_code == 400

    def test_full_round(self, client, as_andy, locked_round):
        # Lines and picks were entered before tip-off
        db.session.add_all(
            [
                Prediction(round_id=locked_round.id, submitter="andy", player="josh", stat="pts", value=10),
                Prediction(round_id=locked_round.id, submitter="ronit", player="josh", stat="pts", value=14),
                Pick(round_id=locked_round.id, picker="andy", player="josh", stat="pts", picked=True),
                Pick(round_id=locked_round.id, picker="ronit", player="josh", stat="pts", picked=True),
            ]
        )
        locked_round.regenerate_lines()
        db.session.commit()

        response = as_andy.put(
            "/api/rounds/2/results",
            json={
                "results": [{"player": "josh", "stat": "pts", "value": 10}],
                "prop_results": [{"prop_type": "team_mvp", "winners": ["josh", "tyler"]}],
            },
        )
        assert response.status_code == 200

        results = client.get("/api/rounds/2/results").get_json()
        assert results["prop_results"] == [{"prop_type": "team_mvp", "winners": ["josh", "tyler"]}]

        response = as_andy.post("/api/rounds/2/scores")
        assert response.status_code == 200

        # Line 12, result 10: both overs miss, andy called it exactly
        scores = {s["player"]: s["total_points"] for s in response.get_json()["scores"]}
        assert scores == {"andy": 0.5, "ronit": -0.5}

        # Scoring again changes nothing
        as_andy.post("/api/rounds/2/scores")
        assert Score.query.count() == 2

        board = client.get("/api/leaderboard").get_json()["leaderboard"]
        assert [(e["player"], e["total_points"]) for e in board] == [
            ("andy", 0.5),
            ("josh", 0.0),
            ("ronit", -0.5),
        ]

    def test_blank_prop_winners_clear_category(self, as_andy, locked_round):
        url = "/api/rounds/2/results"
        as_andy.put(url, json={"prop_results": [{"prop_type": "team_mvp", "winners": "josh"}]})
        as_andy.put(url, json={"prop_results": [{"prop_type": "team_mvp", "winners": ""}]})

        assert as_andy.get(url).get_json()["prop_results"] == []

    def test_prop_only_update_keeps_stat_results(self, as_andy, locked_round):
        url = "/api/rounds/2/results"
        as_andy.put(url, json={"results": [{"player": "josh", "stat": "pts", "value": 10}]})

        response = as_andy.put(
            url, json={"prop_results": [{"prop_type": "team_mvp", "winners": "josh"}]}
        )

        assert response.status_code == 200
        assert response.get_json()["results"] is None
        assert Result.query.count() == 1
        assert Result.query.one().value == 10

    def test_empty_results_list_clears_stats(self, as_andy, locked_round):
        url = "/api/rounds/2/results"
        as_andy.put(url, json={"results": [{"player": "josh", "stat": "pts", "value": 10}]})

        as_andy.put(url, json={"results": []})

        assert Result.query.count() == 0


class TestStats:
    def test_season_stats(self, as_andy, locked_round):
        as_andy.put(
            "/api/rounds/2/results",
            json={
                "results": [{"player": "tyler", "stat": "pts", "value": 8}],
                "prop_results": [{"prop_type": "team_mvp", "winners": "tyler"}],
            },
        )

        data = as_andy.get("/api/stats").get_json()

        tyler = next(row for row in data["players"] if row["player"] == "tyler")
        assert tyler["stats"]["pts"] == {"total": 8, "games": 1, "per_game": 8.0}
        assert data["weekly_mvps"] == [{"round": 2, "label": "Week 2", "winners": ["tyler"]}]


class TestSecurityHeaders:
    def test_headers(self, client, players):
        response = client.get("/api/players")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


def test_deactivated_participant_is_dropped(as_andy, players):
    Player.query.filter_by(name="andy").update({"is_active": False})
    db.session.commit()

    assert as_andy.get("/api/session").get_json() == {"participant": None}

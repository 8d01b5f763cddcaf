import pytest
from fastapi.testclient import TestClient

from golftrip import config, deps, main
from golftrip.storage import MemStorage


def _player(client, first, last, handicap=None, team_id=None):
    payload = {"firstName": first, "lastName": last, "handicap": handicap, "teamId": team_id}
    r = client.post("/api/players", json=payload)
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def setup_trip(client):
    team_a = client.post("/api/teams", json={"name": "Team A"}).json()
    team_b = client.post("/api/teams", json={"name": "Team B"}).json()
    players_a = [_player(client, "A", str(i), 10, team_a["id"]) for i in range(4)]
    players_b = [_player(client, "B", str(i), 10, team_b["id"]) for i in range(4)]
    rnd = client.post("/api/rounds", json={"course": "amendoeira", "date": "2025-07-03", "day": 2}).json()
    return {"team_a": team_a, "team_b": team_b, "a": players_a, "b": players_b, "round": rnd}


def _match_payload(trip, pair_a, pair_b):
    return {
        "roundId": trip["round"]["id"],
        "teamA": trip["team_a"]["id"],
        "teamB": trip["team_b"]["id"],
        "pairAPlayer1": pair_a[0]["id"],
        "pairAPlayer2": pair_a[1]["id"],
        "pairBPlayer1": pair_b[0]["id"],
        "pairBPlayer2": pair_b[1]["id"],
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# players
# ---------------------------------------------------------------------------

def test_create_player_camel_case(client):
    p = _player(client, "Chris", "Slack", "12.4")
    assert p["firstName"] == "Chris"
    assert p["handicap"] == 12.4
    assert "teamId" in p

    assert client.get(f"/api/players/{p['id']}").json()["lastName"] == "Slack"


def test_blank_handicap_is_stored_as_null(client):
    assert _player(client, "No", "Handicap", "")["handicap"] is None


def test_missing_player_is_404(client):
    r = client.get("/api/players/999")
    assert r.status_code == 404
    assert r.json() == {"message": "Player not found", "error": "NOT_FOUND"}


def test_update_missing_player_is_404(client):
    r = client.patch("/api/players/999", json={"handicap": 3})
    assert r.status_code == 404


def test_team_players(client, setup_trip):
    team_id = setup_trip["team_a"]["id"]
    players = client.get(f"/api/teams/{team_id}/players").json()
    assert [p["id"] for p in players] == [p["id"] for p in setup_trip["a"]]


# ---------------------------------------------------------------------------
# scores
# ---------------------------------------------------------------------------

def test_submit_score_upserts(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    player_id = setup_trip["a"][0]["id"]

    first = client.post("/api/scores", json={"roundId": round_id, "playerId": player_id, "hole": 4, "score": 5})
    second = client.post(
        "/api/scores",
        json={"roundId": round_id, "playerId": player_id, "hole": 4, "score": 6, "threePutt": True},
    )
    assert first.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    scores = client.get(f"/api/scores/{round_id}").json()
    assert len(scores) == 1
    assert scores[0]["score"] == 6
    assert scores[0]["threePutt"] is True

    assert client.get("/api/scores", params={"roundId": round_id}).json() == scores
    assert client.get("/api/scores").json() == []
    assert len(client.get("/api/scores/all").json()) == 1


@pytest.mark.parametrize("hole,score", [(0, 4), (19, 4), (3, 0)])
def test_score_validation(client, setup_trip, hole, score):
    payload = {"roundId": setup_trip["round"]["id"], "playerId": 1, "hole": hole, "score": score}
    assert client.post("/api/scores", json=payload).status_code == 422


def test_patch_score(client, setup_trip):
    payload = {"roundId": setup_trip["round"]["id"], "playerId": setup_trip["a"][0]["id"], "hole": 1, "score": 7}
    score_id = client.post("/api/scores", json=payload).json()["id"]

    r = client.patch(f"/api/scores/{score_id}", json={"inWater": True})
    assert r.json()["inWater"] is True
    assert r.json()["score"] == 7


# ---------------------------------------------------------------------------
# matches
# ---------------------------------------------------------------------------

def test_fourball_limit(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    assert client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2])).status_code == 200
    assert client.post("/api/matches", json=_match_payload(setup_trip, a[2:], b[2:])).status_code == 200

    r = client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2]))
    assert r.status_code == 400
    assert r.json() == {"message": "Maximum 2 fourballs allowed per day", "error": "FOURBALL_LIMIT_EXCEEDED"}


def test_player_already_assigned(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2]))

    r = client.post("/api/matches", json=_match_payload(setup_trip, [a[1], a[2]], b[2:]))
    assert r.status_code == 400
    assert r.json()["error"] == "PLAYER_ALREADY_ASSIGNED"


def test_cross_team_pairing_rejected(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    r = client.post("/api/matches", json=_match_payload(setup_trip, [a[0], b[0]], b[1:3]))
    assert r.status_code == 400
    assert r.json()["error"] == "INVALID_PAIRING"


def test_match_listing(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    m = client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2])).json()
    round_id = setup_trip["round"]["id"]

    assert m["pairAPlayer1"] == a[0]["id"]
    assert m["status"] == "active"
    assert [x["id"] for x in client.get(f"/api/matches/{round_id}").json()] == [m["id"]]
    assert [x["id"] for x in client.get("/api/matches", params={"roundId": round_id}).json()] == [m["id"]]
    assert client.get("/api/matches", params={"roundId": round_id + 100}).json() == []


def test_replace_matches(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    round_id = setup_trip["round"]["id"]
    client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2]))

    pairings = [
        {k: v for k, v in _match_payload(setup_trip, a[:2], b[2:]).items() if k != "roundId"},
        {k: v for k, v in _match_payload(setup_trip, a[2:], b[:2]).items() if k != "roundId"},
    ]
    r = client.put(f"/api/rounds/{round_id}/matches", json=pairings)
    assert r.status_code == 200
    assert len(r.json()) == 2
    assert [m["pairBPlayer1"] for m in client.get(f"/api/matches/{round_id}").json()] == [b[2]["id"], b[0]["id"]]


def test_rejected_replacement_over_api(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    round_id = setup_trip["round"]["id"]
    client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2]))
    client.post("/api/matches", json=_match_payload(setup_trip, a[2:], b[2:]))
    before = client.get(f"/api/matches/{round_id}").json()

    pairings = [
        {k: v for k, v in _match_payload(setup_trip, a[:2], b[:2]).items() if k != "roundId"},
        {k: v for k, v in _match_payload(setup_trip, [a[0], a[3]], b[2:]).items() if k != "roundId"},
    ]
    r = client.put(f"/api/rounds/{round_id}/matches", json=pairings)
    assert r.status_code == 400
    assert r.json()["error"] == "PLAYER_ALREADY_ASSIGNED"
    assert client.get(f"/api/matches/{round_id}").json() == before


def test_replace_matches_unknown_round(client):
    assert client.put("/api/rounds/999/matches", json=[]).status_code == 404


def test_match_for_unknown_round(client, setup_trip):
    payload = _match_payload(setup_trip, setup_trip["a"][:2], setup_trip["b"][:2])
    payload["roundId"] = 999
    r = client.post("/api/matches", json=payload)
    assert r.status_code == 404
    assert r.json() == {"message": "Round not found", "error": "NOT_FOUND"}


def test_match_status_and_day(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    round_id = setup_trip["round"]["id"]
    m = client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2])).json()

    # amendoeira hole 1: par 4, stroke index 7; everyone gets a stroke off 10
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[0]["id"], "hole": 1, "score": 4})
    client.post("/api/scores", json={"roundId": round_id, "playerId": b[0]["id"], "hole": 1, "score": 6})

    status = client.get(f"/api/matches/{m['id']}/status").json()
    assert status["match"]["id"] == m["id"]
    assert status["result"]["status"] == "1UP"
    assert status["result"]["holesPlayed"] == 1
    assert status["result"]["holesRemaining"] == 17
    assert status["result"]["leader"] == "teamA"
    assert status["result"]["winningTeam"] is None
    assert status["result"]["holes"][0]["sideAPoints"] == [3, 0]

    day = client.get("/api/matchplay/day/2").json()
    assert day["day"] == 2
    assert len(day["matches"]) == 1
    assert day["teamPoints"] == {str(setup_trip["team_a"]["id"]): 0.0, str(setup_trip["team_b"]["id"]): 0.0}

    assert client.get("/api/matchplay/day/1").json()["matches"] == []


def test_match_status_missing(client):
    assert client.get("/api/matches/42/status").status_code == 404


def test_individual_match(client, setup_trip):
    a, b = setup_trip["a"], setup_trip["b"]
    round_id = setup_trip["round"]["id"]

    r = client.post("/api/individual-matches", json={"roundId": round_id, "player1": a[0]["id"], "player2": a[0]["id"]})
    assert r.status_code == 422

    m = client.post(
        "/api/individual-matches", json={"roundId": round_id, "player1": a[0]["id"], "player2": b[0]["id"]}
    ).json()
    client.post("/api/scores", json={"roundId": round_id, "playerId": b[0]["id"], "hole": 2, "score": 3})

    status = client.get(f"/api/individual-matches/{m['id']}/status").json()
    assert status["status"] == "1UP"
    assert status["leader"] == "teamB"

    updated = client.patch(f"/api/individual-matches/{m['id']}", json={"status": "completed"}).json()
    assert updated["status"] == "completed"
    assert [x["id"] for x in client.get(f"/api/individual-matches/{round_id}").json()] == [m["id"]]


# ---------------------------------------------------------------------------
# leaderboards and public page
# ---------------------------------------------------------------------------

def test_leaderboard_players(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    a = setup_trip["a"]
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[0]["id"], "hole": 1, "score": 5})
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[1]["id"], "hole": 1, "score": 4})

    rows = client.get("/api/leaderboard/players", params={"mode": "gross"}).json()
    assert [row["player"]["id"] for row in rows] == [a[1]["id"], a[0]["id"]]
    assert rows[0]["toPar"] == 4 - 72
    assert rows[0]["roundsPlayed"] == 1
    assert rows[0]["team"]["id"] == setup_trip["team_a"]["id"]

    stableford = client.get("/api/leaderboard/players", params={"mode": "stableford"}).json()
    assert [row["total"] for row in stableford] == [3, 2]
    assert stableford[0]["toPar"] is None


def test_leaderboard_teams(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    client.post("/api/scores", json={"roundId": round_id, "playerId": setup_trip["b"][0]["id"], "hole": 1, "score": 4})

    rows = client.get("/api/leaderboard/teams", params={"mode": "net"}).json()
    assert len(rows) == 1
    assert rows[0]["team"]["name"] == "Team B"
    assert rows[0]["total"] == 3
    assert rows[0]["playersCount"] == 4


def test_leaderboard_bad_mode(client):
    assert client.get("/api/leaderboard/players", params={"mode": "skins"}).status_code == 422


def test_public_page(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    client.post("/api/scores", json={"roundId": round_id, "playerId": setup_trip["a"][0]["id"], "hole": 1, "score": 4})
    a, b = setup_trip["a"], setup_trip["b"]
    client.post("/api/matches", json=_match_payload(setup_trip, a[:2], b[:2]))

    r = client.get("/public", params={"mode": "stableford"})
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "A 0" in r.text
    assert "Day 2 matchplay" in r.text


def test_root_redirects_to_public(client):
    r = client.get("/", follow_redirects=False)
    assert r.status_code in (302, 307)
    assert r.headers["location"] == "/public"


# ---------------------------------------------------------------------------
# rounds and admin
# ---------------------------------------------------------------------------

def test_round_defaults(client):
    r = client.post("/api/rounds", json={"course": "nau", "date": "2025-07-02"}).json()
    assert r["format"] == "stroke"
    assert r["players"] == []
    assert r["day"] is None


def test_round_day_out_of_range(client):
    assert client.post("/api/rounds", json={"course": "nau", "date": "x", "day": 4}).status_code == 422


def test_delete_round_cascades(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    client.post("/api/scores", json={"roundId": round_id, "playerId": 1, "hole": 1, "score": 4})

    r = client.delete(f"/api/rounds/{round_id}")
    assert r.json() == {"message": "Round deleted successfully"}
    assert client.get(f"/api/rounds/{round_id}").status_code == 404
    assert client.get(f"/api/scores/{round_id}").json() == []


def test_admin_key_required(client, setup_trip, monkeypatch):
    monkeypatch.setattr(config, "ADMIN_KEY", "secret")
    round_id = setup_trip["round"]["id"]

    assert client.delete(f"/api/rounds/{round_id}").status_code == 401
    assert client.post(f"/api/rounds/{round_id}/clear").status_code == 401

    r = client.post(f"/api/rounds/{round_id}/clear", headers={"X-Admin-Key": "secret"})
    assert r.status_code == 200

    client.cookies.set("admin_key", "secret")
    assert client.delete(f"/api/rounds/{round_id}").status_code == 200


# ---------------------------------------------------------------------------
# reference data, fines, votes
# ---------------------------------------------------------------------------

def test_courses(client):
    all_courses = client.get("/api/courses").json()
    assert [c["id"] for c in all_courses] == ["nau", "amendoeira", "quinta"]
    assert all(len(c["holes"]) == 18 for c in all_courses)

    quinta = client.get("/api/courses/quinta").json()
    assert quinta["par"] == 71
    assert quinta["holes"][4] == {"hole": 5, "par": 5, "yardage": 505, "handicap": 1}
    assert sorted(h["handicap"] for h in quinta["holes"]) == list(range(1, 19))

    assert client.get("/api/courses/augusta").status_code == 404


def test_fines(client):
    p1 = _player(client, "Tom", "Miller", 28)
    p2 = _player(client, "Emma", "Davis", 20)

    r = client.post("/api/fines", json={"playerId": p1["id"], "type": "3-putt", "golfDay": "July 2, 2025"})
    assert r.status_code == 200
    assert r.json()["amount"] == 1

    client.post("/api/fines", json={"playerId": p2["id"], "type": "ladies-tee", "golfDay": "July 2, 2025"})
    client.post("/api/fines", json={"playerId": p1["id"], "type": "woody", "golfDay": "July 3, 2025"})

    custom = client.post("/api/fines", json={"playerId": p1["id"], "type": "custom", "golfDay": "July 3, 2025"})
    assert custom.json()["amount"] == 0
    assert client.post("/api/fines", json={"playerId": p1["id"], "type": "made-up", "golfDay": "July 2, 2025"}).status_code == 422

    totals = client.get("/api/fines/totals").json()
    assert [(row["player"]["id"], row["total"]) for row in totals] == [(p2["id"], 5), (p1["id"], 2)]

    day_fines = client.get(f"/api/fines/{p1['id']}/July 2, 2025").json()
    assert [f["type"] for f in day_fines] == ["3-putt"]

    assert len(client.get("/api/fines/standard").json()) == 8


def test_votes(client):
    client.post("/api/votes", json={"activity": "adventure-gokart"})
    vote = client.post("/api/votes", json={"activity": "adventure-gokart"}).json()
    assert vote["count"] == 2
    assert len(client.get("/api/votes").json()) == 1
    assert len(client.get("/api/activities").json()) == 12


def test_round_statistics(client, setup_trip):
    round_id = setup_trip["round"]["id"]
    a = setup_trip["a"]
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[0]["id"], "hole": 1, "score": 6, "threePutt": True})
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[0]["id"], "hole": 2, "score": 5, "inWater": True})
    client.post("/api/scores", json={"roundId": round_id, "playerId": a[1]["id"], "hole": 1, "score": 7, "pickedUp": True})

    stats = client.get(f"/api/rounds/{round_id}/statistics").json()
    assert stats["roundId"] == round_id
    assert [row["player"]["id"] for row in stats["players"]] == [a[0]["id"], a[1]["id"]]
    assert stats["players"][0]["holesPlayed"] == 2
    assert stats["players"][0]["threePutt"] == 1
    assert stats["players"][0]["inWater"] == 1
    assert stats["totals"] == {"threePutt": 1, "pickedUp": 1, "inWater": 1, "inBunker": 0}

    assert client.get("/api/rounds/999/statistics").status_code == 404


def test_sample_data_seeded_on_startup(monkeypatch):
    monkeypatch.setattr(config, "SEED_SAMPLE_DATA", True)
    fresh = MemStorage()
    monkeypatch.setattr(main, "mem_storage", fresh)
    monkeypatch.setattr(deps, "mem_storage", fresh)

    with TestClient(main.app) as test_client:
        players = test_client.get("/api/players").json()
    assert len(players) == 8
    assert {p["teamId"] for p in players} == {t.id for t in fresh.get_teams()}

# golftrip/routers/public.py

from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse

from golftrip import courses, leaderboard
from golftrip.deps import get_storage
from golftrip.schemas import LeaderboardMode
from golftrip.storage import Storage
from golftrip.templates import templates

router = APIRouter()


@router.get("/public", response_class=HTMLResponse)
def public_leaderboard(
    request: Request,
    mode: LeaderboardMode = "gross",
    storage: Storage = Depends(get_storage),
):
    players = storage.get_players()
    teams = storage.get_teams()
    rounds = storage.get_rounds()
    scores = storage.get_all_scores()
    matches = storage.get_all_matches()

    days = [
        {"label": label, **leaderboard.matchplay_day(day, rounds, matches, scores, players, teams)}
        for day, label in courses.GOLF_DAYS.items()
    ]

    return templates.TemplateResponse(
        request,
        "leaderboard.html",
        {
            "mode": mode,
            "modes": leaderboard.MODES,
            "player_rows": leaderboard.player_leaderboard(players, teams, rounds, scores, mode),
            "team_rows": leaderboard.team_leaderboard(players, teams, rounds, scores, mode),
            "days": [d for d in days if d["matches"]],
            "teams_by_id": {t.id: t for t in teams},
        },
    )

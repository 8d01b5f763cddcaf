import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse

from . import config, courses, leaderboard, schemas
from .crud import DatabaseStorage
from .db import Base, SessionLocal, engine
from .deps import get_storage, mem_storage
from .exceptions import GolfTripError, NotFoundError
from .routers import public
from .storage import Storage, seed_sample_data

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if config.STORAGE_BACKEND == "database":
    Base.metadata.create_all(bind=engine)


def require_admin(request: Request):
    # 1) No ADMIN_KEY configured -> dev mode, nothing to protect
    if not config.ADMIN_KEY:
        return

    # 2) cookie or header
    key = request.cookies.get("admin_key") or request.headers.get("X-Admin-Key")
    if key == config.ADMIN_KEY:
        return

    raise HTTPException(status_code=401, detail="Admin auth required")


def seed_on_startup():
    if not config.SEED_SAMPLE_DATA:
        return
    if config.STORAGE_BACKEND == "memory":
        seed_sample_data(mem_storage)
        return

    db = SessionLocal()
    try:
        seed_sample_data(DatabaseStorage(db))
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    seed_on_startup()
    yield


app = FastAPI(title="Golf Trip", lifespan=lifespan)
app.include_router(public.router)


@app.exception_handler(GolfTripError)
def golf_trip_error_handler(request: Request, exc: GolfTripError):
    if not isinstance(exc, NotFoundError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail, "error": exc.code},
    )


def _found(obj, entity: str, obj_id: int):
    if obj is None:
        raise NotFoundError(entity, obj_id)
    return obj


# ---------------------------------------------------------------------------------

@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/public")


@app.get("/health")
def health():
    return {"status": "ok"}


#--------------------------------------------------------------------------------
#----------------------------------- PLAYERS ------------------------------------
#--------------------------------------------------------------------------------

@app.get("/api/players", response_model=List[schemas.PlayerRead])
def players_list(storage: Storage = Depends(get_storage)):
    return storage.get_players()


@app.get("/api/players/{player_id}", response_model=schemas.PlayerRead)
def player_detail(player_id: int, storage: Storage = Depends(get_storage)):
    return _found(storage.get_player(player_id), "Player", player_id)


@app.post("/api/players", response_model=schemas.PlayerRead)
def player_create(data: schemas.PlayerCreate, storage: Storage = Depends(get_storage)):
    return storage.create_player(data)


@app.patch("/api/players/{player_id}", response_model=schemas.PlayerRead)
def player_update(player_id: int, data: schemas.PlayerUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_player(player_id, data)


@app.delete("/api/players/{player_id}", dependencies=[Depends(require_admin)])
def player_delete(player_id: int, storage: Storage = Depends(get_storage)):
    storage.delete_player(player_id)
    return {"success": True}


#--------------------------------------------------------------------------------
#------------------------------------ TEAMS -------------------------------------
#--------------------------------------------------------------------------------

@app.get("/api/teams", response_model=List[schemas.TeamRead])
def teams_list(storage: Storage = Depends(get_storage)):
    return storage.get_teams()


@app.get("/api/teams/{team_id}", response_model=schemas.TeamRead)
def team_detail(team_id: int, storage: Storage = Depends(get_storage)):
    return _found(storage.get_team(team_id), "Team", team_id)


@app.get("/api/teams/{team_id}/players", response_model=List[schemas.PlayerRead])
def team_players(team_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_team_players(team_id)


@app.post("/api/teams", response_model=schemas.TeamRead)
def team_create(data: schemas.TeamCreate, storage: Storage = Depends(get_storage)):
    return storage.create_team(data)


@app.patch("/api/teams/{team_id}", response_model=schemas.TeamRead)
def team_update(team_id: int, data: schemas.TeamUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_team(team_id, data)


@app.delete("/api/teams/{team_id}", dependencies=[Depends(require_admin)])
def team_delete(team_id: int, storage: Storage = Depends(get_storage)):
    storage.delete_team(team_id)
    return {"success": True}


# ======================================================================
# ------------------------------ ROUNDS --------------------------------
#=======================================================================

@app.get("/api/rounds", response_model=List[schemas.RoundRead])
def rounds_list(storage: Storage = Depends(get_storage)):
    return storage.get_rounds()


@app.get("/api/rounds/{round_id}", response_model=schemas.RoundRead)
def round_detail(round_id: int, storage: Storage = Depends(get_storage)):
    return _found(storage.get_round(round_id), "Round", round_id)


@app.post("/api/rounds", response_model=schemas.RoundRead)
def round_create(data: schemas.RoundCreate, storage: Storage = Depends(get_storage)):
    if courses.get_course(data.course) is None:
        logger.warning("round created for unknown course %r", data.course)
    return storage.create_round(data)


@app.patch("/api/rounds/{round_id}", response_model=schemas.RoundRead)
def round_update(round_id: int, data: schemas.RoundUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_round(round_id, data)


@app.delete("/api/rounds/{round_id}", dependencies=[Depends(require_admin)])
def round_delete(round_id: int, storage: Storage = Depends(get_storage)):
    storage.delete_round(round_id)
    return {"message": "Round deleted successfully"}


@app.post("/api/rounds/{round_id}/clear", dependencies=[Depends(require_admin)])
def round_clear_scores(round_id: int, storage: Storage = Depends(get_storage)):
    storage.clear_round_scores(round_id)
    logger.info("scores cleared for round %s", round_id)
    return {"message": "Round scores cleared successfully"}


@app.put(
    "/api/rounds/{round_id}/matches",
    response_model=List[schemas.MatchRead],
    dependencies=[Depends(require_admin)],
)
def round_replace_matches(
    round_id: int,
    pairings: List[schemas.MatchPairing],
    storage: Storage = Depends(get_storage),
):
    return storage.replace_matches(round_id, pairings)


@app.get("/api/rounds/{round_id}/statistics", response_model=schemas.RoundStatistics)
def round_statistics(round_id: int, storage: Storage = Depends(get_storage)):
    _found(storage.get_round(round_id), "Round", round_id)
    stats = leaderboard.round_statistics(storage.get_scores(round_id), storage.get_players())
    return {"round_id": round_id, **stats}


# ======================================================================
# ------------------------------ SCORES --------------------------------
#=======================================================================

@app.get("/api/scores/all", response_model=List[schemas.ScoreRead])
def scores_all(storage: Storage = Depends(get_storage)):
    return storage.get_all_scores()


@app.get("/api/scores/{round_id}", response_model=List[schemas.ScoreRead])
def scores_for_round(round_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_scores(round_id)


@app.get("/api/scores", response_model=List[schemas.ScoreRead])
def scores_query(
    round_id: Optional[int] = Query(default=None, alias="roundId"),
    storage: Storage = Depends(get_storage),
):
    if round_id is None:
        return []
    return storage.get_scores(round_id)


@app.post("/api/scores", response_model=schemas.ScoreRead)
def score_submit(data: schemas.ScoreCreate, storage: Storage = Depends(get_storage)):
    flags = data.model_dump(include={"three_putt", "picked_up", "in_water", "in_bunker"})
    s = storage.submit_score(data.round_id, data.player_id, data.hole, data.score, flags)
    logger.info("score saved: round=%s player=%s hole=%s gross=%s", s.round_id, s.player_id, s.hole, s.score)
    return s


@app.patch("/api/scores/{score_id}", response_model=schemas.ScoreRead)
def score_update(score_id: int, data: schemas.ScoreUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_score(score_id, data)


# ======================================================================
# ------------------------------ MATCHES -------------------------------
#=======================================================================

@app.get("/api/matches", response_model=List[schemas.MatchRead])
def matches_list(
    round_id: Optional[int] = Query(default=None, alias="roundId"),
    storage: Storage = Depends(get_storage),
):
    if round_id is not None:
        return storage.get_matches(round_id)
    return storage.get_all_matches()


@app.get("/api/matches/{round_id}", response_model=List[schemas.MatchRead])
def matches_for_round(round_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_matches(round_id)


@app.post("/api/matches", response_model=schemas.MatchRead)
def match_create(data: schemas.MatchCreate, storage: Storage = Depends(get_storage)):
    return storage.create_match(data)


@app.patch("/api/matches/{match_id}", response_model=schemas.MatchRead)
def match_update(match_id: int, data: schemas.MatchUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_match(match_id, data)


@app.delete("/api/matches/{match_id}", dependencies=[Depends(require_admin)])
def match_delete(match_id: int, storage: Storage = Depends(get_storage)):
    storage.delete_match(match_id)
    return {"success": True}


@app.get("/api/matches/{match_id}/status", response_model=schemas.MatchStatus)
def match_status(match_id: int, storage: Storage = Depends(get_storage)):
    m = _found(storage.get_match(match_id), "Match", match_id)
    r = storage.get_round(m.round_id)
    result = leaderboard.match_result(m, r, storage.get_scores(m.round_id), storage.get_players())
    return {"match": m, "result": result}


@app.get("/api/matchplay/day/{day}", response_model=schemas.MatchplayDay)
def matchplay_day(day: int, storage: Storage = Depends(get_storage)):
    return leaderboard.matchplay_day(
        day,
        storage.get_rounds(),
        storage.get_all_matches(),
        storage.get_all_scores(),
        storage.get_players(),
        storage.get_teams(),
    )


@app.get("/api/individual-matches/{round_id}", response_model=List[schemas.IndividualMatchRead])
def individual_matches_for_round(round_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_individual_matches(round_id)


@app.post("/api/individual-matches", response_model=schemas.IndividualMatchRead)
def individual_match_create(data: schemas.IndividualMatchCreate, storage: Storage = Depends(get_storage)):
    return storage.create_individual_match(data)


@app.patch("/api/individual-matches/{match_id}", response_model=schemas.IndividualMatchRead)
def individual_match_update(
    match_id: int,
    data: schemas.IndividualMatchUpdate,
    storage: Storage = Depends(get_storage),
):
    return storage.update_individual_match(match_id, data)


@app.get("/api/individual-matches/{match_id}/status", response_model=schemas.MatchResult)
def individual_match_status(match_id: int, storage: Storage = Depends(get_storage)):
    m = _found(storage.get_individual_match(match_id), "Individual match", match_id)
    r = storage.get_round(m.round_id)
    return leaderboard.individual_match_result(m, r, storage.get_scores(m.round_id), storage.get_players())


# ======================================================================
# ---------------------------- LEADERBOARDS ----------------------------
#=======================================================================

@app.get("/api/leaderboard/players", response_model=List[schemas.PlayerStanding])
def leaderboard_players(mode: schemas.LeaderboardMode = "gross", storage: Storage = Depends(get_storage)):
    return leaderboard.player_leaderboard(
        storage.get_players(), storage.get_teams(), storage.get_rounds(), storage.get_all_scores(), mode
    )


@app.get("/api/leaderboard/teams", response_model=List[schemas.TeamStanding])
def leaderboard_teams(mode: schemas.LeaderboardMode = "gross", storage: Storage = Depends(get_storage)):
    return leaderboard.team_leaderboard(
        storage.get_players(), storage.get_teams(), storage.get_rounds(), storage.get_all_scores(), mode
    )


# ======================================================================
# -------------------------- FINES AND VOTES ---------------------------
#=======================================================================

@app.get("/api/fines", response_model=List[schemas.FineRead])
def fines_list(storage: Storage = Depends(get_storage)):
    return storage.get_fines()


@app.get("/api/fines/standard")
def fines_standard():
    return courses.STANDARD_FINES


@app.get("/api/fines/totals", response_model=List[schemas.FineTotal])
def fines_totals(storage: Storage = Depends(get_storage)):
    return leaderboard.fine_totals(storage.get_fines(), storage.get_players())


@app.get("/api/fines/{player_id}/{golf_day}", response_model=List[schemas.FineRead])
def fines_for_player_day(player_id: int, golf_day: str, storage: Storage = Depends(get_storage)):
    return storage.get_fines_by_player_and_day(player_id, golf_day)


@app.post("/api/fines", response_model=schemas.FineRead)
def fine_create(data: schemas.FineCreate, storage: Storage = Depends(get_storage)):
    return storage.create_fine(data)


@app.get("/api/votes", response_model=List[schemas.VoteRead])
def votes_list(storage: Storage = Depends(get_storage)):
    return storage.get_votes()


@app.post("/api/votes", response_model=schemas.VoteRead)
def vote_cast(data: schemas.VoteCreate, storage: Storage = Depends(get_storage)):
    return storage.cast_vote(data.activity)


@app.get("/api/activities")
def activities_list():
    return courses.ACTIVITIES


# ======================================================================
# ------------------------------ COURSES -------------------------------
#=======================================================================

def _course_json(course):
    return {
        "id": course.id,
        "name": course.name,
        "par": course.par,
        "description": course.description,
        "website": course.website,
        "signatureHole": course.signature_hole,
        "holes": [
            {"hole": h.number, "par": h.par, "yardage": h.yardage, "handicap": h.stroke_index}
            for h in course.holes
        ],
    }


@app.get("/api/courses")
def courses_list():
    return [_course_json(c) for c in courses.COURSES.values()]


@app.get("/api/courses/{course_id}")
def course_detail(course_id: str):
    course = courses.get_course(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return _course_json(course)

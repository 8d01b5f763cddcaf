import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .exceptions import NotFoundError, ScoreConflictError
from .storage import Storage, SCORE_FLAGS

logger = logging.getLogger(__name__)


class DatabaseStorage(Storage):
    """SQLAlchemy-backed storage; one instance per request session."""

    def __init__(self, db: Session):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _update(self, model, entity: str, obj_id: int, values: dict):
        obj = self.db.query(model).filter(model.id == obj_id).first()
        if not obj:
            raise NotFoundError(entity, obj_id)
        for k, v in values.items():
            setattr(obj, k, v)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _delete(self, model, obj_id: int):
        obj = self.db.query(model).filter(model.id == obj_id).first()
        if not obj:
            return False
        self.db.delete(obj)
        self.db.commit()
        return True

    #---------------------------------------------------------------------------------
    # ---------------------------------- Players -------------------------------------
    # --------------------------------------------------------------------------------

    def get_players(self):
        return self.db.query(models.Player).order_by(models.Player.id).all()

    def get_player(self, player_id: int):
        return self.db.query(models.Player).filter(models.Player.id == player_id).first()

    def create_player(self, data: schemas.PlayerCreate):
        return self._save(models.Player(**data.model_dump()))

    def update_player(self, player_id: int, data: schemas.PlayerUpdate):
        return self._update(models.Player, "Player", player_id, data.model_dump(exclude_unset=True))

    def delete_player(self, player_id: int):
        return self._delete(models.Player, player_id)

    def get_team_players(self, team_id: int):
        return (
            self.db.query(models.Player)
            .filter(models.Player.team_id == team_id)
            .order_by(models.Player.id)
            .all()
        )

    #---------------------------------------------------------------------------------
    # ----------------------------------- Teams --------------------------------------
    # --------------------------------------------------------------------------------

    def get_teams(self):
        return self.db.query(models.Team).order_by(models.Team.id).all()

    def get_team(self, team_id: int):
        return self.db.query(models.Team).filter(models.Team.id == team_id).first()

    def create_team(self, data: schemas.TeamCreate):
        return self._save(models.Team(**data.model_dump()))

    def update_team(self, team_id: int, data: schemas.TeamUpdate):
        return self._update(models.Team, "Team", team_id, data.model_dump(exclude_unset=True))

    def delete_team(self, team_id: int):
        return self._delete(models.Team, team_id)

    #---------------------------------------------------------------------------------
    # ----------------------------------- Rounds -------------------------------------
    # --------------------------------------------------------------------------------

    def get_rounds(self):
        return self.db.query(models.Round).order_by(models.Round.id).all()

    def get_round(self, round_id: int):
        return self.db.query(models.Round).filter(models.Round.id == round_id).first()

    def create_round(self, data: schemas.RoundCreate):
        r = self._save(models.Round(**data.model_dump()))
        logger.info("round %s created on %s (%s)", r.id, r.course, r.format)
        return r

    def update_round(self, round_id: int, data: schemas.RoundUpdate):
        return self._update(models.Round, "Round", round_id, data.model_dump(exclude_unset=True))

    def delete_round(self, round_id: int):
        # children first: scores and matches reference the round
        self.db.query(models.Score).filter(models.Score.round_id == round_id).delete()
        self.db.query(models.Match).filter(models.Match.round_id == round_id).delete()
        self.db.query(models.IndividualMatch).filter(models.IndividualMatch.round_id == round_id).delete()
        self.db.query(models.Round).filter(models.Round.id == round_id).delete()
        self.db.commit()
        logger.info("round %s deleted", round_id)

    def clear_round_scores(self, round_id: int):
        self.db.query(models.Score).filter(models.Score.round_id == round_id).delete()
        self.db.commit()

    #---------------------------------------------------------------------------------
    # ----------------------------------- Scores -------------------------------------
    # --------------------------------------------------------------------------------

    def get_scores(self, round_id: int):
        return (
            self.db.query(models.Score)
            .filter(models.Score.round_id == round_id)
            .order_by(models.Score.player_id, models.Score.hole)
            .all()
        )

    def get_all_scores(self):
        return self.db.query(models.Score).order_by(models.Score.id).all()

    def submit_score(self, round_id: int, player_id: int, hole: int, gross: int, flags=None):
        flags = {k: bool(v) for k, v in (flags or {}).items() if k in SCORE_FLAGS}

        s = (
            self.db.query(models.Score)
            .filter(
                models.Score.round_id == round_id,
                models.Score.player_id == player_id,
                models.Score.hole == hole,
            )
            .first()
        )

        if s:
            s.score = gross
            for k, v in flags.items():
                setattr(s, k, v)
        else:
            s = models.Score(round_id=round_id, player_id=player_id, hole=hole, score=gross, **flags)
            self.db.add(s)

        try:
            self.db.commit()
        except IntegrityError:
            # another request inserted the same triple between our read and write
            self.db.rollback()
            raise ScoreConflictError()

        self.db.refresh(s)
        return s

    def update_score(self, score_id: int, data: schemas.ScoreUpdate):
        return self._update(
            models.Score, "Score", score_id, data.model_dump(exclude_unset=True, exclude_none=True)
        )

    #---------------------------------------------------------------------------------
    # ----------------------------------- Matches ------------------------------------
    # --------------------------------------------------------------------------------

    def get_matches(self, round_id: int):
        return (
            self.db.query(models.Match)
            .filter(models.Match.round_id == round_id)
            .order_by(models.Match.id)
            .all()
        )

    def get_all_matches(self):
        return self.db.query(models.Match).order_by(models.Match.id).all()

    def get_match(self, match_id: int):
        return self.db.query(models.Match).filter(models.Match.id == match_id).first()

    def _insert_match(self, data: schemas.MatchCreate):
        return self._save(models.Match(**data.model_dump()))

    def update_match(self, match_id: int, data: schemas.MatchUpdate):
        return self._update(models.Match, "Match", match_id, data.model_dump(exclude_unset=True))

    def delete_match(self, match_id: int):
        return self._delete(models.Match, match_id)

    def get_individual_matches(self, round_id: int):
        return (
            self.db.query(models.IndividualMatch)
            .filter(models.IndividualMatch.round_id == round_id)
            .order_by(models.IndividualMatch.id)
            .all()
        )

    def get_individual_match(self, match_id: int):
        return self.db.query(models.IndividualMatch).filter(models.IndividualMatch.id == match_id).first()

    def create_individual_match(self, data: schemas.IndividualMatchCreate):
        return self._save(models.IndividualMatch(**data.model_dump()))

    def update_individual_match(self, match_id: int, data: schemas.IndividualMatchUpdate):
        return self._update(
            models.IndividualMatch, "Individual match", match_id, data.model_dump(exclude_unset=True)
        )

    #---------------------------------------------------------------------------------
    # ------------------------------- Fines and votes --------------------------------
    # --------------------------------------------------------------------------------

    def get_fines(self):
        return self.db.query(models.Fine).order_by(models.Fine.created_at, models.Fine.id).all()

    def get_fines_by_player_and_day(self, player_id: int, golf_day: str):
        return (
            self.db.query(models.Fine)
            .filter(models.Fine.player_id == player_id, models.Fine.golf_day == golf_day)
            .all()
        )

    def create_fine(self, data: schemas.FineCreate):
        return self._save(models.Fine(**data.model_dump()))

    def get_votes(self):
        return self.db.query(models.Vote).order_by(models.Vote.id).all()

    def get_vote_by_activity(self, activity: str):
        return self.db.query(models.Vote).filter(models.Vote.activity == activity).first()

    def create_vote(self, activity: str, count: int = 0):
        return self._save(models.Vote(activity=activity, count=count))

    def set_vote_count(self, vote_id: int, count: int):
        return self._update(models.Vote, "Vote", vote_id, {"count": count})

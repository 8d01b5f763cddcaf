"""
Storage interface for the trip data.

Two implementations share it: MemStorage (dicts, for tests and quick local
runs) and crud.DatabaseStorage (SQLAlchemy). Both hand back models.* instances;
MemStorage simply never attaches them to a session.

Cross-entity rules (fourball limit, one match per player per round, vote
counting, bulk match replacement) live here so both backends enforce them
identically.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime

from . import models, schemas
from .exceptions import (
    FourballLimitError,
    InvalidMatchPairingError,
    NotFoundError,
    PlayerAlreadyAssignedError,
)

logger = logging.getLogger(__name__)

MAX_MATCHES_PER_ROUND = 2

SCORE_FLAGS = ("three_putt", "picked_up", "in_water", "in_bunker")


def _pairing_player_ids(data):
    return [data.pair_a_player1, data.pair_a_player2, data.pair_b_player1, data.pair_b_player2]


class Storage(ABC):

    # ------------------------------- Players -----------------------------------

    @abstractmethod
    def get_players(self): ...

    @abstractmethod
    def get_player(self, player_id: int): ...

    @abstractmethod
    def create_player(self, data: schemas.PlayerCreate): ...

    @abstractmethod
    def update_player(self, player_id: int, data: schemas.PlayerUpdate): ...

    @abstractmethod
    def delete_player(self, player_id: int): ...

    def get_team_players(self, team_id: int):
        return [p for p in self.get_players() if p.team_id == team_id]

    # -------------------------------- Teams ------------------------------------

    @abstractmethod
    def get_teams(self): ...

    @abstractmethod
    def get_team(self, team_id: int): ...

    @abstractmethod
    def create_team(self, data: schemas.TeamCreate): ...

    @abstractmethod
    def update_team(self, team_id: int, data: schemas.TeamUpdate): ...

    @abstractmethod
    def delete_team(self, team_id: int): ...

    # -------------------------------- Rounds -----------------------------------

    @abstractmethod
    def get_rounds(self): ...

    @abstractmethod
    def get_round(self, round_id: int): ...

    @abstractmethod
    def create_round(self, data: schemas.RoundCreate): ...

    @abstractmethod
    def update_round(self, round_id: int, data: schemas.RoundUpdate): ...

    @abstractmethod
    def delete_round(self, round_id: int):
        """Deletes the round with its scores and matches."""

    @abstractmethod
    def clear_round_scores(self, round_id: int): ...

    # -------------------------------- Scores -----------------------------------

    @abstractmethod
    def get_scores(self, round_id: int): ...

    @abstractmethod
    def get_all_scores(self): ...

    @abstractmethod
    def submit_score(self, round_id: int, player_id: int, hole: int, gross: int, flags=None):
        """Insert or overwrite the single score of (round_id, player_id, hole)."""

    @abstractmethod
    def update_score(self, score_id: int, data: schemas.ScoreUpdate): ...

    # ------------------------------- Matches -----------------------------------

    @abstractmethod
    def get_matches(self, round_id: int): ...

    @abstractmethod
    def get_all_matches(self): ...

    @abstractmethod
    def get_match(self, match_id: int): ...

    @abstractmethod
    def _insert_match(self, data: schemas.MatchCreate): ...

    @abstractmethod
    def update_match(self, match_id: int, data: schemas.MatchUpdate): ...

    @abstractmethod
    def delete_match(self, match_id: int): ...

    def create_match(self, data: schemas.MatchCreate):
        if self.get_round(data.round_id) is None:
            raise NotFoundError("Round", data.round_id)

        self._check_pairing(data)

        existing = self.get_matches(data.round_id)
        if len(existing) >= MAX_MATCHES_PER_ROUND:
            logger.warning("round %s already has %s fourballs", data.round_id, len(existing))
            raise FourballLimitError()

        assigned = set()
        for m in existing:
            assigned.update(m.player_ids)

        for pid in _pairing_player_ids(data):
            if pid in assigned:
                logger.warning("player %s already plays in round %s", pid, data.round_id)
                raise PlayerAlreadyAssignedError(pid)

        return self._insert_match(data)

    def replace_matches(self, round_id: int, pairings):
        """
        Swap every fourball of the round for `pairings`.

        The whole batch is validated first: when it is rejected the round
        keeps its current matches.
        """
        if self.get_round(round_id) is None:
            raise NotFoundError("Round", round_id)

        batch = [schemas.MatchCreate(round_id=round_id, **p.model_dump()) for p in pairings]
        for data in batch:
            self._check_pairing(data)

        if len(batch) > MAX_MATCHES_PER_ROUND:
            logger.warning("round %s: %s fourballs submitted", round_id, len(batch))
            raise FourballLimitError()

        seen = set()
        for data in batch:
            for pid in _pairing_player_ids(data):
                if pid in seen:
                    raise PlayerAlreadyAssignedError(pid)
                seen.add(pid)

        # the delete-then-create itself is not one transaction
        for m in self.get_matches(round_id):
            self.delete_match(m.id)

        return [self.create_match(data) for data in batch]

    def _check_pairing(self, data):
        ids = _pairing_player_ids(data)
        if len(set(ids)) != len(ids) or data.team_a == data.team_b:
            raise InvalidMatchPairingError()

        team_a_ids = {p.id for p in self.get_team_players(data.team_a)}
        team_b_ids = {p.id for p in self.get_team_players(data.team_b)}

        if not {data.pair_a_player1, data.pair_a_player2} <= team_a_ids:
            raise InvalidMatchPairingError()
        if not {data.pair_b_player1, data.pair_b_player2} <= team_b_ids:
            raise InvalidMatchPairingError()

    # -------------------------- Individual matches -----------------------------

    @abstractmethod
    def get_individual_matches(self, round_id: int): ...

    @abstractmethod
    def get_individual_match(self, match_id: int): ...

    @abstractmethod
    def create_individual_match(self, data: schemas.IndividualMatchCreate): ...

    @abstractmethod
    def update_individual_match(self, match_id: int, data: schemas.IndividualMatchUpdate): ...

    # -------------------------------- Fines ------------------------------------

    @abstractmethod
    def get_fines(self): ...

    @abstractmethod
    def create_fine(self, data: schemas.FineCreate): ...

    def get_fines_by_player_and_day(self, player_id: int, golf_day: str):
        return [f for f in self.get_fines() if f.player_id == player_id and f.golf_day == golf_day]

    # -------------------------------- Votes ------------------------------------

    @abstractmethod
    def get_votes(self): ...

    @abstractmethod
    def get_vote_by_activity(self, activity: str): ...

    @abstractmethod
    def create_vote(self, activity: str, count: int = 0): ...

    @abstractmethod
    def set_vote_count(self, vote_id: int, count: int): ...

    def cast_vote(self, activity: str):
        vote = self.get_vote_by_activity(activity)
        if vote:
            return self.set_vote_count(vote.id, vote.count + 1)
        return self.create_vote(activity, count=1)


class MemStorage(Storage):

    def __init__(self):
        self._players = {}
        self._teams = {}
        self._rounds = {}
        self._scores = {}
        self._matches = {}
        self._individual_matches = {}
        self._fines = {}
        self._votes = {}
        self._current_id = 1

    def _next_id(self):
        i = self._current_id
        self._current_id += 1
        return i

    @staticmethod
    def _apply(obj, values: dict):
        for k, v in values.items():
            setattr(obj, k, v)
        return obj

    def _require(self, table: dict, entity: str, obj_id: int):
        obj = table.get(obj_id)
        if obj is None:
            raise NotFoundError(entity, obj_id)
        return obj

    # Players
    def get_players(self):
        return list(self._players.values())

    def get_player(self, player_id):
        return self._players.get(player_id)

    def create_player(self, data):
        p = models.Player(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._players[p.id] = p
        return p

    def update_player(self, player_id, data):
        p = self._require(self._players, "Player", player_id)
        return self._apply(p, data.model_dump(exclude_unset=True))

    def delete_player(self, player_id):
        self._players.pop(player_id, None)

    # Teams
    def get_teams(self):
        return list(self._teams.values())

    def get_team(self, team_id):
        return self._teams.get(team_id)

    def create_team(self, data):
        t = models.Team(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._teams[t.id] = t
        return t

    def update_team(self, team_id, data):
        t = self._require(self._teams, "Team", team_id)
        return self._apply(t, data.model_dump(exclude_unset=True))

    def delete_team(self, team_id):
        self._teams.pop(team_id, None)

    # Rounds
    def get_rounds(self):
        return list(self._rounds.values())

    def get_round(self, round_id):
        return self._rounds.get(round_id)

    def create_round(self, data):
        r = models.Round(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._rounds[r.id] = r
        logger.info("round %s created on %s (%s)", r.id, r.course, r.format)
        return r

    def update_round(self, round_id, data):
        r = self._require(self._rounds, "Round", round_id)
        return self._apply(r, data.model_dump(exclude_unset=True))

    def delete_round(self, round_id):
        self._rounds.pop(round_id, None)
        self.clear_round_scores(round_id)
        for table in (self._matches, self._individual_matches):
            for mid in [m.id for m in table.values() if m.round_id == round_id]:
                del table[mid]
        logger.info("round %s deleted", round_id)

    def clear_round_scores(self, round_id):
        for sid in [s.id for s in self._scores.values() if s.round_id == round_id]:
            del self._scores[sid]

    # Scores
    def get_scores(self, round_id):
        return [s for s in self._scores.values() if s.round_id == round_id]

    def get_all_scores(self):
        return list(self._scores.values())

    def submit_score(self, round_id, player_id, hole, gross, flags=None):
        flags = {k: bool(v) for k, v in (flags or {}).items() if k in SCORE_FLAGS}

        for s in self._scores.values():
            if s.round_id == round_id and s.player_id == player_id and s.hole == hole:
                s.score = gross
                return self._apply(s, flags)

        s = models.Score(
            id=self._next_id(),
            round_id=round_id,
            player_id=player_id,
            hole=hole,
            score=gross,
            created_at=datetime.utcnow(),
            **{k: flags.get(k, False) for k in SCORE_FLAGS},
        )
        self._scores[s.id] = s
        return s

    def update_score(self, score_id, data):
        s = self._require(self._scores, "Score", score_id)
        return self._apply(s, data.model_dump(exclude_unset=True, exclude_none=True))

    # Matches
    def get_matches(self, round_id):
        return [m for m in self._matches.values() if m.round_id == round_id]

    def get_all_matches(self):
        return list(self._matches.values())

    def get_match(self, match_id):
        return self._matches.get(match_id)

    def _insert_match(self, data):
        m = models.Match(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._matches[m.id] = m
        return m

    def update_match(self, match_id, data):
        m = self._require(self._matches, "Match", match_id)
        return self._apply(m, data.model_dump(exclude_unset=True))

    def delete_match(self, match_id):
        self._matches.pop(match_id, None)

    # Individual matches
    def get_individual_matches(self, round_id):
        return [m for m in self._individual_matches.values() if m.round_id == round_id]

    def get_individual_match(self, match_id):
        return self._individual_matches.get(match_id)

    def create_individual_match(self, data):
        m = models.IndividualMatch(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._individual_matches[m.id] = m
        return m

    def update_individual_match(self, match_id, data):
        m = self._require(self._individual_matches, "Individual match", match_id)
        return self._apply(m, data.model_dump(exclude_unset=True))

    # Fines
    def get_fines(self):
        return list(self._fines.values())

    def create_fine(self, data):
        f = models.Fine(id=self._next_id(), created_at=datetime.utcnow(), **data.model_dump())
        self._fines[f.id] = f
        return f

    # Votes
    def get_votes(self):
        return list(self._votes.values())

    def get_vote_by_activity(self, activity):
        for v in self._votes.values():
            if v.activity == activity:
                return v
        return None

    def create_vote(self, activity, count=0):
        v = models.Vote(id=self._next_id(), activity=activity, count=count, created_at=datetime.utcnow())
        self._votes[v.id] = v
        return v

    def set_vote_count(self, vote_id, count):
        v = self._require(self._votes, "Vote", vote_id)
        v.count = count
        return v


SAMPLE_PLAYERS = [
    ("John", "Doe", 12.0), ("Jane", "Smith", 18.0), ("Chris", "Slack", 9.4), ("Mike", "Johnson", 24.0),
    ("Sarah", "Wilson", 15.2), ("David", "Brown", 6.0), ("Emma", "Davis", 20.0), ("Tom", "Miller", 28.0),
]


def seed_sample_data(storage: Storage):
    """Eight players in two teams of four. Does nothing once 8 players exist."""
    if len(storage.get_players()) >= 8:
        return

    players = [
        storage.create_player(schemas.PlayerCreate(first_name=first, last_name=last, handicap=hcp))
        for first, last, hcp in SAMPLE_PLAYERS
    ]

    team_a = storage.create_team(schemas.TeamCreate(name="Team A", captain_id=players[0].id))
    team_b = storage.create_team(schemas.TeamCreate(name="Team B", captain_id=players[4].id))

    for i, p in enumerate(players):
        team = team_a if i < 4 else team_b
        storage.update_player(p.id, schemas.PlayerUpdate(team_id=team.id))

    logger.info("sample data seeded: %s players, 2 teams", len(players))


from datetime import datetime

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Boolean, DateTime, JSON
from sqlalchemy import UniqueConstraint

from .db import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    handicap = Column(Numeric(4, 1, asdecimal=False), nullable=True)
    team_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}"


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    captain_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Round(Base):
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, index=True)
    course = Column(String, nullable=False)           # id in courses.COURSES
    date = Column(String, nullable=False)
    players = Column(JSON, nullable=False, default=list)
    format = Column(String, nullable=False, default="stroke")  # stroke/betterball/matchplay
    day = Column(Integer, nullable=True)              # trip day 1..3
    created_at = Column(DateTime, default=datetime.utcnow)


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (
        UniqueConstraint("round_id", "player_id", "hole", name="uq_score_round_player_hole"),
    )

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    player_id = Column(Integer, nullable=False, index=True)
    hole = Column(Integer, nullable=False)            # 1..18
    score = Column(Integer, nullable=False)           # gross strokes

    three_putt = Column(Boolean, default=False)
    picked_up = Column(Boolean, default=False)
    in_water = Column(Boolean, default=False)
    in_bunker = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    team_a = Column(Integer, nullable=False)
    team_b = Column(Integer, nullable=False)

    pair_a_player1 = Column(Integer, nullable=False)
    pair_a_player2 = Column(Integer, nullable=False)
    pair_b_player1 = Column(Integer, nullable=False)
    pair_b_player2 = Column(Integer, nullable=False)

    match_type = Column(String, nullable=False, default="fourball")  # fourball/individual
    status = Column(String, default="active")         # active/completed
    result = Column(String, nullable=True)            # "3&2", "1UP", "AS"
    winning_team = Column(Integer, nullable=True)     # None = halved
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def player_ids(self):
        return [self.pair_a_player1, self.pair_a_player2, self.pair_b_player1, self.pair_b_player2]


class IndividualMatch(Base):
    __tablename__ = "individual_matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    player1 = Column(Integer, nullable=False)
    player2 = Column(Integer, nullable=False)
    status = Column(String, default="active")
    result = Column(String, nullable=True)
    winning_player = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Fine(Base):
    __tablename__ = "fines"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    golf_day = Column(String, nullable=False)         # "July 2, 2025"
    created_at = Column(DateTime, default=datetime.utcnow)


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    activity = Column(String, nullable=False, unique=True)
    count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

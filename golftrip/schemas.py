from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from . import courses

RoundFormat = Literal["stroke", "betterball", "matchplay"]
LeaderboardMode = Literal["gross", "net", "stableford"]


class CamelModel(BaseModel):
    # accepts both roundId and round_id, answers in camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _blank_to_none(v):
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


# --------------------------------------------------------------------------------
# ----------------------------------- Players ------------------------------------
# --------------------------------------------------------------------------------

class PlayerCreate(CamelModel):
    first_name: str
    last_name: str
    handicap: Optional[float] = None
    team_id: Optional[int] = None

    @field_validator("handicap", mode="before")
    @classmethod
    def blank_handicap(cls, v):
        return _blank_to_none(v)


class PlayerUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    handicap: Optional[float] = None
    team_id: Optional[int] = None

    @field_validator("handicap", mode="before")
    @classmethod
    def blank_handicap(cls, v):
        return _blank_to_none(v)


class PlayerRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    handicap: Optional[float] = None
    team_id: Optional[int] = None
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ------------------------------------ Teams -------------------------------------
# --------------------------------------------------------------------------------

class TeamCreate(CamelModel):
    name: str
    captain_id: Optional[int] = None


class TeamUpdate(CamelModel):
    name: Optional[str] = None
    captain_id: Optional[int] = None


class TeamRead(CamelModel):
    id: int
    name: str
    captain_id: Optional[int] = None
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ------------------------------------ Rounds ------------------------------------
# --------------------------------------------------------------------------------

class RoundCreate(CamelModel):
    course: str
    date: str
    players: list[str] = []
    format: RoundFormat = "stroke"
    day: Optional[int] = Field(default=None, ge=1, le=3)


class RoundUpdate(CamelModel):
    course: Optional[str] = None
    date: Optional[str] = None
    players: Optional[list[str]] = None
    format: Optional[RoundFormat] = None
    day: Optional[int] = Field(default=None, ge=1, le=3)


class RoundRead(CamelModel):
    id: int
    course: str
    date: str
    players: list[str] = []
    format: str
    day: Optional[int] = None
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ------------------------------------ Scores ------------------------------------
# --------------------------------------------------------------------------------

class ScoreFlags(CamelModel):
    three_putt: bool = False
    picked_up: bool = False
    in_water: bool = False
    in_bunker: bool = False


class ScoreCreate(ScoreFlags):
    round_id: int
    player_id: int
    hole: int = Field(ge=1, le=18)
    score: int = Field(ge=1)


class ScoreUpdate(CamelModel):
    score: Optional[int] = Field(default=None, ge=1)
    three_putt: Optional[bool] = None
    picked_up: Optional[bool] = None
    in_water: Optional[bool] = None
    in_bunker: Optional[bool] = None


class ScoreRead(CamelModel):
    id: int
    round_id: int
    player_id: int
    hole: int
    score: int
    three_putt: bool = False
    picked_up: bool = False
    in_water: bool = False
    in_bunker: bool = False
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ----------------------------------- Matches ------------------------------------
# --------------------------------------------------------------------------------

class MatchPairing(CamelModel):
    team_a: int
    team_b: int
    pair_a_player1: int
    pair_a_player2: int
    pair_b_player1: int
    pair_b_player2: int
    match_type: Literal["fourball", "individual"] = "fourball"


class MatchCreate(MatchPairing):
    round_id: int
    status: str = "active"
    result: Optional[str] = None
    winning_team: Optional[int] = None


class MatchUpdate(CamelModel):
    status: Optional[str] = None
    result: Optional[str] = None
    winning_team: Optional[int] = None


class MatchRead(CamelModel):
    id: int
    round_id: int
    team_a: int
    team_b: int
    pair_a_player1: int
    pair_a_player2: int
    pair_b_player1: int
    pair_b_player2: int
    match_type: str
    status: Optional[str] = None
    result: Optional[str] = None
    winning_team: Optional[int] = None
    created_at: Optional[datetime] = None


class IndividualMatchCreate(CamelModel):
    round_id: int
    player1: int
    player2: int
    status: str = "active"
    result: Optional[str] = None
    winning_player: Optional[int] = None

    @model_validator(mode="after")
    def different_players(self):
        if self.player1 == self.player2:
            raise ValueError("player1 and player2 must be different players")
        return self


class IndividualMatchUpdate(CamelModel):
    status: Optional[str] = None
    result: Optional[str] = None
    winning_player: Optional[int] = None


class IndividualMatchRead(CamelModel):
    id: int
    round_id: int
    player1: int
    player2: int
    status: Optional[str] = None
    result: Optional[str] = None
    winning_player: Optional[int] = None
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ------------------------------- Fines and votes --------------------------------
# --------------------------------------------------------------------------------

class FineCreate(CamelModel):
    player_id: int
    type: str
    amount: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    golf_day: str

    @model_validator(mode="after")
    def fill_standard_amount(self):
        # standard fines may omit the amount
        if self.amount is None:
            self.amount = courses.standard_fine_amount(self.type)
        if self.amount is None:
            raise ValueError(f"amount is required for fine type {self.type!r}")
        return self


class FineRead(CamelModel):
    id: int
    player_id: int
    type: str
    amount: int
    description: Optional[str] = None
    golf_day: str
    created_at: Optional[datetime] = None


class VoteCreate(CamelModel):
    activity: str


class VoteRead(CamelModel):
    id: int
    activity: str
    count: int
    created_at: Optional[datetime] = None


# --------------------------------------------------------------------------------
# ------------------------------- Computed views ---------------------------------
# --------------------------------------------------------------------------------

class PlayerStanding(CamelModel):
    player: PlayerRead
    team: Optional[TeamRead] = None
    total: int
    to_par: Optional[int] = None
    rounds_played: int
    holes_played: int
    average: float
    best: int


class TeamStanding(CamelModel):
    team: TeamRead
    total: int
    to_par: Optional[int] = None
    rounds_played: int
    players_count: int
    average: float
    best: int


class HoleResult(CamelModel):
    hole: int
    side_a_points: list[int]
    side_b_points: list[int]
    winner: str


class MatchResult(CamelModel):
    holes_won_a: int
    holes_won_b: int
    holes_played: int
    holes_remaining: int
    status: str
    leader: Optional[str] = None
    decided: bool
    points_a: int
    points_b: int
    holes: list[HoleResult]
    winning_team: Optional[int] = None
    winning_player: Optional[int] = None


class MatchStatus(CamelModel):
    match: MatchRead
    result: MatchResult


class MatchplayDay(CamelModel):
    day: int
    matches: list[MatchStatus]
    team_points: dict[int, float]


class FlagCounts(CamelModel):
    three_putt: int = 0
    picked_up: int = 0
    in_water: int = 0
    in_bunker: int = 0


class PlayerRoundStatistics(FlagCounts):
    player: PlayerRead
    holes_played: int


class RoundStatistics(CamelModel):
    round_id: int
    players: list[PlayerRoundStatistics]
    totals: FlagCounts


class FineTotal(CamelModel):
    player: PlayerRead
    total: int

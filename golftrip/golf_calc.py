import math

HOLES_PER_ROUND = 18
DEFAULT_PAR = 4

TEAM_A = "teamA"
TEAM_B = "teamB"
TIE = "tie"


def parse_handicap(value) -> float:
    """
    Handicap as stored (None, "12.4", 12.4, Decimal) -> float.
    Missing, unparseable or negative values count as 0.
    """
    if value is None:
        return 0.0
    try:
        h = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(h) or h < 0:
        return 0.0
    return h


def strokes_received(handicap, stroke_index) -> int:
    h = parse_handicap(handicap)
    if not isinstance(stroke_index, int) or not 1 <= stroke_index <= HOLES_PER_ROUND:
        return 0

    base = int(h // HOLES_PER_ROUND)
    extra = 1 if h % HOLES_PER_ROUND >= stroke_index else 0
    return base + extra


def strokes_received_per_hole(handicap, holes):
    """
    holes: CourseHole list with stroke_index
    returns dict {hole_number: strokes_received}
    """
    return {h.number: strokes_received(handicap, h.stroke_index) for h in holes}


def net_score(gross: int, strokes: int) -> int:
    return gross - strokes


def stableford_points(net_strokes: int, par: int) -> int:
    diff = net_strokes - par
    if diff >= 2: return 0
    if diff == 1: return 1
    if diff == 0: return 2
    if diff == -1: return 3
    if diff == -2: return 4
    return 5


def score_hole(gross: int, handicap, hole) -> dict:
    """
    Full breakdown for one gross score. hole may be None (unknown course/hole):
    par falls back to DEFAULT_PAR and no strokes are received.
    """
    if hole is None:
        par, strokes = DEFAULT_PAR, 0
    else:
        par, strokes = hole.par, strokes_received(handicap, hole.stroke_index)

    net = net_score(gross, strokes)
    return {
        "gross": gross,
        "par": par,
        "strokes": strokes,
        "net": net,
        "points": stableford_points(net, par),
    }


def resolve_hole(side_a_points, side_b_points) -> str:
    # betterball: the best ball of each side counts
    best_a = max(side_a_points, default=0)
    best_b = max(side_b_points, default=0)

    if best_a > best_b:
        return TEAM_A
    if best_b > best_a:
        return TEAM_B
    return TIE


def match_status(holes_won: int, holes_lost: int, holes_remaining: int) -> str:
    lead = abs(holes_won - holes_lost)

    if lead == 0:
        return "AS"

    # closed out: the trailing side can no longer catch up
    if lead > holes_remaining:
        return f"{lead}&{holes_remaining + 1}"

    return f"{lead}UP"


def match_play(side_a, side_b, scores, handicaps, holes_by_number) -> dict:
    """
    Head-to-head Stableford matchplay for one round.

    side_a / side_b: player ids of each side (two for betterball, one for singles)
    scores: Score rows of the round (other players are ignored)
    handicaps: {player_id: handicap}
    holes_by_number: {hole_number: CourseHole}

    Only holes where at least one of the match's players has a score are played.
    A player without a score on a played hole contributes 0 points there.
    """
    players = set(side_a) | set(side_b)
    gross = {}
    for s in scores:
        if s.player_id in players:
            gross[(s.player_id, s.hole)] = s.score

    played = sorted({hole for (_, hole) in gross})

    def points(player_id, hole):
        g = gross.get((player_id, hole))
        if g is None:
            return 0
        return score_hole(g, handicaps.get(player_id), holes_by_number.get(hole))["points"]

    won_a = won_b = 0
    total_a = total_b = 0
    hole_results = []

    for hole in played:
        a_points = [points(pid, hole) for pid in side_a]
        b_points = [points(pid, hole) for pid in side_b]
        winner = resolve_hole(a_points, b_points)

        if winner == TEAM_A:
            won_a += 1
        elif winner == TEAM_B:
            won_b += 1

        total_a += max(a_points, default=0)
        total_b += max(b_points, default=0)

        hole_results.append({
            "hole": hole,
            "side_a_points": a_points,
            "side_b_points": b_points,
            "winner": winner,
        })

    remaining = max(HOLES_PER_ROUND - len(played), 0)

    leader = None
    if won_a > won_b:
        leader = TEAM_A
    elif won_b > won_a:
        leader = TEAM_B

    return {
        "holes_won_a": won_a,
        "holes_won_b": won_b,
        "holes_played": len(played),
        "holes_remaining": remaining,
        "status": match_status(won_a, won_b, remaining),
        "leader": leader,
        "decided": abs(won_a - won_b) > remaining or remaining == 0,
        "points_a": total_a,
        "points_b": total_b,
        "holes": hole_results,
    }

from collections import defaultdict

from . import courses
from .golf_calc import score_hole, match_play, TEAM_A, TEAM_B
from .storage import SCORE_FLAGS

MODES = ("gross", "net", "stableford")

# the aggregator does not know each course's real par
STANDARD_ROUND_PAR = 72


def _check_mode(mode):
    if mode not in MODES:
        raise ValueError(f"unknown leaderboard mode: {mode!r}")


def _hole_value(score, player, rounds_by_id, mode):
    r = rounds_by_id.get(score.round_id)
    hole = courses.get_hole(r.course, score.hole) if r is not None else None
    breakdown = score_hole(score.score, player.handicap, hole)
    if mode == "stableford":
        return breakdown["points"]
    if mode == "net":
        return breakdown["net"]
    return breakdown["gross"]


def _sort_rows(rows, mode):
    # sorted() is stable: ties keep roster order
    if mode == "stableford":
        return sorted(rows, key=lambda row: -row["total"])
    return sorted(rows, key=lambda row: row["to_par"])


def player_leaderboard(players, teams, rounds, scores, mode="gross"):
    """
    Cumulative leaderboard across every round.

    gross: sum of strokes, net: sum of per-hole net scores,
    stableford: sum of per-hole points. Players without scores are left out.
    """
    _check_mode(mode)

    rounds_by_id = {r.id: r for r in rounds}
    teams_by_id = {t.id: t for t in teams}

    scores_by_player = defaultdict(list)
    for s in scores:
        scores_by_player[s.player_id].append(s)

    rows = []
    for p in players:
        player_scores = scores_by_player.get(p.id)
        if not player_scores:
            continue

        per_round = defaultdict(int)
        for s in player_scores:
            per_round[s.round_id] += _hole_value(s, p, rounds_by_id, mode)

        total = sum(per_round.values())
        rounds_played = len(per_round)

        if mode == "stableford":
            to_par = None
            best = max(per_round.values())
        else:
            to_par = total - rounds_played * STANDARD_ROUND_PAR
            best = min(per_round.values())

        rows.append({
            "player": p,
            "team": teams_by_id.get(p.team_id),
            "total": total,
            "to_par": to_par,
            "rounds_played": rounds_played,
            "holes_played": len(player_scores),
            "average": total / rounds_played,
            "best": best,
        })

    return _sort_rows(rows, mode)


def team_leaderboard(players, teams, rounds, scores, mode="gross"):
    """
    Team totals: every score of every player on the team.
    rounds_played counts distinct (player, round) pairs; best is the best
    single (player, round) total.
    """
    _check_mode(mode)

    rounds_by_id = {r.id: r for r in rounds}
    players_by_id = {p.id: p for p in players}

    rows = []
    for t in teams:
        team_player_ids = {p.id for p in players if p.team_id == t.id}
        team_scores = [s for s in scores if s.player_id in team_player_ids]
        if not team_scores:
            continue

        per_player_round = defaultdict(int)
        for s in team_scores:
            value = _hole_value(s, players_by_id[s.player_id], rounds_by_id, mode)
            per_player_round[(s.player_id, s.round_id)] += value

        total = sum(per_player_round.values())
        rounds_played = len(per_player_round)
        best = max(per_player_round.values()) if mode == "stableford" else min(per_player_round.values())
        to_par = None if mode == "stableford" else total - rounds_played * STANDARD_ROUND_PAR

        rows.append({
            "team": t,
            "total": total,
            "to_par": to_par,
            "rounds_played": rounds_played,
            "players_count": len(team_player_ids),
            "average": total / rounds_played,
            "best": best,
        })

    return _sort_rows(rows, mode)


def match_result(match, round_, scores, players):
    """Betterball status of one Match (pair A = team_a)."""
    handicaps = {p.id: p.handicap for p in players}
    course = courses.get_course(round_.course) if round_ is not None else None
    holes_by_number = {h.number: h for h in course.holes} if course else {}

    result = match_play(
        [match.pair_a_player1, match.pair_a_player2],
        [match.pair_b_player1, match.pair_b_player2],
        [s for s in scores if round_ is not None and s.round_id == round_.id],
        handicaps,
        holes_by_number,
    )

    winning_team = None
    if result["decided"] and result["leader"] == TEAM_A:
        winning_team = match.team_a
    elif result["decided"] and result["leader"] == TEAM_B:
        winning_team = match.team_b
    result["winning_team"] = winning_team
    return result


def individual_match_result(match, round_, scores, players):
    handicaps = {p.id: p.handicap for p in players}
    course = courses.get_course(round_.course) if round_ is not None else None
    holes_by_number = {h.number: h for h in course.holes} if course else {}

    result = match_play(
        [match.player1],
        [match.player2],
        [s for s in scores if round_ is not None and s.round_id == round_.id],
        handicaps,
        holes_by_number,
    )

    winning_player = None
    if result["decided"] and result["leader"] == TEAM_A:
        winning_player = match.player1
    elif result["decided"] and result["leader"] == TEAM_B:
        winning_player = match.player2
    result["winning_player"] = winning_player
    return result


def matchplay_day(day, rounds, matches, scores, players, teams):
    """
    Status of every fourball on a trip day plus the team tally:
    1 point for a won match, half each for a match finished all square.
    """
    day_rounds = {r.id: r for r in rounds if r.day == day}
    day_matches = [m for m in matches if m.round_id in day_rounds]

    tally = {t.id: 0.0 for t in teams}
    rows = []

    for m in day_matches:
        result = match_result(m, day_rounds[m.round_id], scores, players)

        if result["winning_team"] is not None:
            tally[result["winning_team"]] = tally.get(result["winning_team"], 0.0) + 1
        elif result["holes_remaining"] == 0:
            tally[m.team_a] = tally.get(m.team_a, 0.0) + 0.5
            tally[m.team_b] = tally.get(m.team_b, 0.0) + 0.5

        rows.append({"match": m, "result": result})

    return {"day": day, "matches": rows, "team_points": tally}


def fine_totals(fines, players):
    totals = defaultdict(int)
    for f in fines:
        totals[f.player_id] += f.amount

    rows = [
        {"player": p, "total": totals[p.id]}
        for p in players if p.id in totals
    ]
    return sorted(rows, key=lambda row: -row["total"])


def round_statistics(scores, players):
    """
    Score-flag counts (three-putts, pick-ups, water, bunkers) per player,
    in roster order, plus totals over those players.
    """
    counts = {}
    for s in scores:
        row = counts.setdefault(s.player_id, {"holes_played": 0, **{flag: 0 for flag in SCORE_FLAGS}})
        row["holes_played"] += 1
        for flag in SCORE_FLAGS:
            if getattr(s, flag):
                row[flag] += 1

    rows = [{"player": p, **counts[p.id]} for p in players if p.id in counts]
    totals = {flag: sum(row[flag] for row in rows) for flag in SCORE_FLAGS}
    return {"players": rows, "totals": totals}

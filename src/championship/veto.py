"""Deterministic map-veto prediction from two teams' per-map statistics.

The simulation walks a fixed step sequence and, at each step, takes the
first still-available map from one of four precomputed orderings of the
map pool (ascending/descending by each team's win rate). Sorting is stable,
so ties always fall back to map pool order and the same inputs always give
the same veto.

Sequences (A = first team, B = second team, D = decider):

* BO1: A ban, B ban, A ban, B ban, A ban, B ban, decider
* BO3: A ban, B ban, A pick, B pick, A ban, B ban, decider

A ban is skipped rather than taking the last available map, so shorter
pools still end on a decider.
"""

import logging

from championship.models import (
    MapDiff,
    MapStat,
    TeamMapProfile,
    VetoPatterns,
    VetoPrediction,
    VetoStep,
)
from championship.models.veto import DEFAULT_WIN_RATE

logger = logging.getLogger(__name__)

# CS2 map pool in enumeration order; ties in every ordering resolve to this
ALL_MAPS = (
    "de_train",
    "de_dust2",
    "de_mirage",
    "de_overpass",
    "de_inferno",
    "de_nuke",
    "de_ancient",
)

MAP_DISPLAY_NAMES = {
    "de_train": "Train",
    "de_dust2": "Dust 2",
    "de_mirage": "Mirage",
    "de_overpass": "Overpass",
    "de_inferno": "Inferno",
    "de_nuke": "Nuke",
    "de_ancient": "Ancient",
    "de_anubis": "Anubis",
    "de_vertigo": "Vertigo",
}

HIGH_DIFF_THRESHOLD = 15.0
VETO_FORMATS = ("BO1", "BO3")


def _lookup_stat(profile: TeamMapProfile, display: str, key: str) -> MapStat | None:
    return profile.map_stats.get(display) or profile.map_stats.get(key)


def _history_count(counts: dict[str, int], diff: MapDiff) -> int:
    return counts.get(diff.map_name) or counts.get(diff.map_key) or 0


def build_map_diffs(
    team_a: TeamMapProfile,
    team_b: TeamMapProfile,
    map_pool=ALL_MAPS,
) -> list[MapDiff]:
    """Pair both teams' win rates for every map in the pool.

    Maps a team has no record on count as ``DEFAULT_WIN_RATE``.
    """
    diffs = []
    for key in map_pool:
        display = MAP_DISPLAY_NAMES.get(key, key)
        stat_a = _lookup_stat(team_a, display, key)
        stat_b = _lookup_stat(team_b, display, key)
        diffs.append(
            MapDiff(
                map_name=display,
                map_key=key,
                team_a_win_rate=stat_a.win_rate if stat_a else DEFAULT_WIN_RATE,
                team_b_win_rate=stat_b.win_rate if stat_b else DEFAULT_WIN_RATE,
                team_a_played=stat_a.played if stat_a else 0,
                team_b_played=stat_b.played if stat_b else 0,
            )
        )
    return diffs


class _VetoState:
    """Tracks banned/picked maps and the emitted steps."""

    def __init__(self, pool: list[MapDiff]) -> None:
        self.pool = pool
        self.banned: set[str] = set()
        self.picked: list[str] = []
        self.steps: list[VetoStep] = []

    def is_available(self, diff: MapDiff) -> bool:
        return diff.map_name not in self.banned and diff.map_name not in self.picked

    def remaining(self) -> int:
        return sum(1 for d in self.pool if self.is_available(d))

    def first_available(self, ordering: list[MapDiff]) -> MapDiff | None:
        return next((d for d in ordering if self.is_available(d)), None)

    def record(self, team: str, action: str, diff: MapDiff, reason: str) -> None:
        if action == "ban":
            self.banned.add(diff.map_name)
        else:
            self.picked.append(diff.map_name)
        self.steps.append(
            VetoStep(
                step_number=len(self.steps) + 1,
                team=team,
                action=action,
                map_name=diff.map_name,
                reason=reason,
            )
        )

    def can_ban(self) -> bool:
        # Never ban the last map; it is the decider
        return self.remaining() > 1


def _first_ban(
    state: _VetoState,
    patterns: VetoPatterns,
    worst_first: list[MapDiff],
) -> tuple[MapDiff | None, int]:
    """Pick a team's opening ban: historical favourite, else weakest map.

    Returns the map and its historical first-ban count (0 when chosen by
    win rate). Ties between equally frequent historical bans resolve to
    the team's weaker map.
    """
    if patterns.first_bans:
        best, best_count = None, 0
        for diff in worst_first:
            if not state.is_available(diff):
                continue
            count = _history_count(patterns.first_bans, diff)
            if count > best_count:
                best, best_count = diff, count
        if best is not None:
            return best, best_count
    return state.first_available(worst_first), 0


def _win_rate(diff: MapDiff, side: str) -> float:
    return diff.team_a_win_rate if side == "A" else diff.team_b_win_rate


def predict_veto(
    team_a: TeamMapProfile,
    team_b: TeamMapProfile,
    fmt: str = "BO3",
    map_pool=ALL_MAPS,
) -> VetoPrediction:
    """Simulate the veto between ``team_a`` (first to act) and ``team_b``.

    Args:
        team_a: Profile of the team that bans first.
        team_b: Profile of the other team.
        fmt: ``"BO1"`` or ``"BO3"`` (case-insensitive).
        map_pool: Map keys in enumeration order.

    Returns:
        VetoPrediction with the ordered steps, the maps that will be played
        (picks then decider), maps with a win-rate gap of at least 15
        points, and each side's first ban and pick.

    Raises:
        ValueError: for an unknown format.
    """
    fmt = fmt.upper()
    if fmt not in VETO_FORMATS:
        raise ValueError(f"format must be one of {VETO_FORMATS}, got {fmt!r}")

    diffs = build_map_diffs(team_a, team_b, map_pool)
    a_worst = sorted(diffs, key=lambda d: d.team_a_win_rate)
    b_worst = sorted(diffs, key=lambda d: d.team_b_win_rate)
    a_best = sorted(diffs, key=lambda d: -d.team_a_win_rate)
    b_best = sorted(diffs, key=lambda d: -d.team_b_win_rate)

    state = _VetoState(diffs)
    sides = (("A", team_a, a_worst), ("B", team_b, b_worst))

    # Opening bans are identical for both formats
    for side, profile, worst in sides:
        if not state.can_ban():
            break
        choice, count = _first_ban(state, profile.veto_patterns, worst)
        if choice is None:
            continue
        if count:
            reason = f"Typical first ban ({count}x in history)"
        else:
            reason = f"Weakest map ({_win_rate(choice, side):g}% WR)"
        state.record(side, "ban", choice, reason)

    if fmt == "BO1":
        for side, worst in (("A", a_worst), ("B", b_worst)):
            choice = state.first_available(worst)
            if choice is not None and state.can_ban():
                state.record(
                    side, "ban", choice,
                    f"2nd weakest ({_win_rate(choice, side):g}% WR)",
                )
    else:
        for side, best in (("A", a_best), ("B", b_best)):
            choice = state.first_available(best)
            if choice is not None:
                state.record(
                    side, "pick", choice,
                    f"Best map ({_win_rate(choice, side):g}% WR)",
                )

    # Each side removes the opponent's strongest remaining map
    for side, opponent, opponent_best in (
        ("A", team_b, b_best),
        ("B", team_a, a_best),
    ):
        choice = state.first_available(opponent_best)
        if choice is not None and state.can_ban():
            opponent_side = "B" if side == "A" else "A"
            state.record(
                side, "ban", choice,
                f"Counter {opponent.label}'s strength "
                f"({_win_rate(choice, opponent_side):g}% WR)",
            )

    decider = state.first_available(diffs)
    if decider is not None:
        state.record("D", "decider", decider, "Last remaining map")

    high_diff_maps = sorted(
        (d for d in diffs if d.gap >= HIGH_DIFF_THRESHOLD),
        key=lambda d: -d.gap,
    )

    def first_of(team: str, action: str) -> str | None:
        return next(
            (s.map_name for s in state.steps if s.team == team and s.action == action),
            None,
        )

    prediction = VetoPrediction(
        format=fmt,
        steps=state.steps,
        predicted_pool=list(state.picked),
        high_diff_maps=high_diff_maps,
        team_a_likely_ban=first_of("A", "ban"),
        team_b_likely_ban=first_of("B", "ban"),
        team_a_likely_pick=first_of("A", "pick"),
        team_b_likely_pick=first_of("B", "pick"),
    )
    logger.debug(
        "%s veto %s vs %s: pool %s",
        fmt, team_a.label, team_b.label, prediction.predicted_pool,
    )
    return prediction


# ---------------------------------------------------------------------------
# Building profiles from FACEIT payloads
# ---------------------------------------------------------------------------

def _to_int(value, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def profile_from_team_stats(
    team: dict,
    team_stats: dict,
    veto_patterns: VetoPatterns | None = None,
) -> TeamMapProfile:
    """Build a TeamMapProfile from FACEIT team and team-stats payloads.

    Only ``Map`` segments in ``5v5`` mode are used; each yields a MapStat
    keyed by the segment label (the map's display name).
    """
    map_stats: dict[str, MapStat] = {}
    for segment in team_stats.get("segments") or []:
        if segment.get("type") != "Map" or segment.get("mode") != "5v5":
            continue
        label = segment.get("label")
        if not label:
            continue
        stats = segment.get("stats") or {}
        win_rate = min(max(_to_int(stats.get("Win Rate %"), 0), 0), 100)
        map_stats[label] = MapStat(
            win_rate=win_rate,
            played=max(_to_int(stats.get("Matches")), 0),
            wins=max(_to_int(stats.get("Wins")), 0),
        )

    return TeamMapProfile(
        team_id=team.get("team_id"),
        name=team.get("name") or "",
        tag=team.get("nickname") or "",
        map_stats=map_stats,
        veto_patterns=veto_patterns or VetoPatterns(),
    )

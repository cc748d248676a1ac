from __future__ import annotations

from .models import PerformanceRecord

DID_NOT_PARTICIPATE = -1.0
MIN_SCORE = 1.0
MAX_SCORE = 10.0
BASE_SCORE = 5.0

IMPORTANCE_MULTIPLIER = {
    "MUST_WIN": 1.5,
    "IMPORTANT": 1.25,
    "REGULAR": 1.0,
    "LOW_STAKES": 0.75,
}


def _clamp(value: float, low: float = MIN_SCORE, high: float = MAX_SCORE) -> float:
    return max(low, min(high, value))


def _finish(score: float, importance: str) -> float:
    return _clamp(score * IMPORTANCE_MULTIPLIER.get(importance, 1.0))


def batting_performance_score(performance: PerformanceRecord) -> float:
    if not performance.did_bat:
        return DID_NOT_PARTICIPATE

    runs = performance.runs_scored
    score = BASE_SCORE

    if runs >= 100:
        score += 3
    elif runs >= 50:
        score += 2.5
    elif runs >= 30:
        score += 1.5
    elif runs >= 20:
        score += 1
    elif runs >= 10:
        score += 0.5
    elif runs < 5 and not performance.is_not_out:
        score -= 1

    if performance.balls_faced > 0:
        strike_rate = runs / performance.balls_faced * 100
        if strike_rate >= 150:
            score += 1
        elif strike_rate >= 120:
            score += 0.5
        elif strike_rate < 70 and performance.balls_faced >= 10:
            score -= 0.5

    if performance.boundaries >= 8:
        score += 0.5
    elif performance.boundaries >= 5:
        score += 0.25

    if performance.is_not_out and runs >= 20:
        score += 0.5

    if performance.is_man_of_match:
        score += 0.5

    return _finish(score, performance.importance)


def bowling_performance_score(performance: PerformanceRecord) -> float:
    if not performance.did_bowl or performance.overs_bowled <= 0:
        return DID_NOT_PARTICIPATE

    wickets = performance.wickets_taken
    score = BASE_SCORE

    if wickets >= 5:
        score += 3
    elif wickets >= 3:
        score += 2
    elif wickets >= 2:
        score += 1.5
    elif wickets >= 1:
        score += 0.75
    else:
        score -= 0.5

    economy = performance.runs_conceded / performance.overs_bowled
    if economy <= 4:
        score += 1.5
    elif economy <= 6:
        score += 1
    elif economy <= 8:
        score += 0.5
    elif economy > 10:
        score -= 1

    if performance.maidens >= 2:
        score += 0.5
    elif performance.maidens >= 1:
        score += 0.25

    if performance.illegal_deliveries >= 5:
        score -= 0.5

    if performance.is_man_of_match:
        score += 0.5

    return _finish(score, performance.importance)


def fielding_performance_score(performance: PerformanceRecord) -> float:
    # Every player fields, so there is no participation sentinel here.
    score = BASE_SCORE

    if performance.catches >= 3:
        score += 2
    elif performance.catches >= 2:
        score += 1.5
    elif performance.catches >= 1:
        score += 0.75

    if performance.run_outs >= 2:
        score += 1
    elif performance.run_outs >= 1:
        score += 0.5

    if performance.stumpings >= 2:
        score += 1
    elif performance.stumpings >= 1:
        score += 0.5

    if performance.dropped_catches >= 2:
        score -= 1.5
    elif performance.dropped_catches >= 1:
        score -= 0.75

    return _finish(score, performance.importance)

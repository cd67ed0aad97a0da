"""Market statistics and competitiveness scoring for a bid."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from statistics import mean
from typing import Any

from bidmarket.schemas.analysis import BidFigures, CompetitiveAnalysis, CostRange, MarketStats

COST_WEIGHT = 40
DURATION_WEIGHT = 30
TEAM_WEIGHT = 0.2
PREVIOUS_WORK_WEIGHT = 0.1

# Sub-scores have no agreed business rules yet; both default to a constant.
PLACEHOLDER_SUB_SCORE = 80.0

TeamScorer = Callable[[list[dict[str, Any]]], float]
PreviousWorkScorer = Callable[[list[dict[str, Any]]], float]


def constant_team_score(team_composition: list[dict[str, Any]]) -> float:
    return PLACEHOLDER_SUB_SCORE


def constant_previous_work_score(previous_work: list[dict[str, Any]]) -> float:
    return PLACEHOLDER_SUB_SCORE


@dataclass(frozen=True)
class BidSnapshot:
    """The figures analysis needs, detached from any session."""

    cost: float
    duration: int
    team_composition: list[dict[str, Any]]
    previous_work: list[dict[str, Any]]

    @classmethod
    def from_bid(cls, bid) -> "BidSnapshot":
        return cls(
            cost=float(bid.total_cost),
            duration=int(bid.duration_months),
            team_composition=list(bid.team_composition or []),
            previous_work=list(bid.previous_work or []),
        )


def market_stats(subject: BidSnapshot, competitors: Sequence[BidSnapshot]) -> MarketStats:
    if not competitors:
        return MarketStats(
            average_cost=subject.cost,
            median_cost=subject.cost,
            cost_range=CostRange(min=subject.cost, max=subject.cost),
            average_duration=float(subject.duration),
            bid_count=1,
        )

    costs = sorted(bid.cost for bid in competitors)
    return MarketStats(
        average_cost=mean(costs),
        median_cost=costs[len(costs) // 2],
        cost_range=CostRange(min=costs[0], max=costs[-1]),
        average_duration=mean(bid.duration for bid in competitors),
        bid_count=len(competitors) + 1,
    )


def _relative_deviation(value: float, average: float) -> float:
    if average == 0:
        return 0.0
    return (value - average) / average


def competitiveness_score(
    subject: BidSnapshot,
    stats: MarketStats,
    team_scorer: TeamScorer = constant_team_score,
    previous_work_scorer: PreviousWorkScorer = constant_previous_work_score,
) -> float:
    score = 100.0
    score -= abs(_relative_deviation(subject.cost, stats.average_cost)) * COST_WEIGHT
    score -= abs(_relative_deviation(subject.duration, stats.average_duration)) * DURATION_WEIGHT
    score += team_scorer(subject.team_composition) * TEAM_WEIGHT
    score += previous_work_scorer(subject.previous_work) * PREVIOUS_WORK_WEIGHT
    return max(0.0, min(100.0, score))


def analyze(
    subject: BidSnapshot,
    competitors: Sequence[BidSnapshot],
    team_scorer: TeamScorer = constant_team_score,
    previous_work_scorer: PreviousWorkScorer = constant_previous_work_score,
) -> CompetitiveAnalysis:
    stats = market_stats(subject, competitors)
    return CompetitiveAnalysis(
        bid=BidFigures(cost=subject.cost, duration=subject.duration),
        market=stats,
        competitiveness=competitiveness_score(
            subject,
            stats,
            team_scorer=team_scorer,
            previous_work_scorer=previous_work_scorer,
        ),
    )

"""Competitive analysis response schemas."""

from __future__ import annotations

from pydantic import BaseModel


class CostRange(BaseModel):
    min: float
    max: float


class MarketStats(BaseModel):
    average_cost: float
    median_cost: float
    cost_range: CostRange
    average_duration: float
    bid_count: int


class BidFigures(BaseModel):
    cost: float
    duration: int


class CompetitiveAnalysis(BaseModel):
    bid: BidFigures
    market: MarketStats
    competitiveness: float

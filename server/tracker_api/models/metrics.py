"""Daily metric and trend models."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from behavior_engine.daily_metrics import ColorBand, Direction, Metric


class MetricScore(BaseModel):
    """One of Focus, Balance or Rhythm for a single day."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    metric: Metric
    score: int = Field(ge=0, le=100)
    color_band: ColorBand = Field(serialization_alias="colorBand")
    label: str
    details: dict


class DailyMetrics(BaseModel):
    """Today's three scores plus a nudge aimed at the weakest."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    date: date
    focus: MetricScore
    balance: MetricScore
    rhythm: MetricScore
    nudge: str


class TrendPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    date: date
    label: str
    value: int
    color_band: ColorBand = Field(serialization_alias="colorBand")


class PersonalBestPoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    value: int
    date: date


class WeekDelta(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    change: int
    direction: Direction


class MetricTrend(BaseModel):
    """Trend of one metric over the requested period."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    current: int
    color_band: ColorBand = Field(serialization_alias="colorBand")
    label: str
    average: int
    trend: list[TrendPoint]
    personal_best: Optional[PersonalBestPoint] = Field(default=None, serialization_alias="personalBest")
    vs_last_week: Optional[WeekDelta] = Field(default=None, serialization_alias="vsLastWeek")
    details: dict


class MetricTrends(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    period: str
    focus: MetricTrend
    balance: MetricTrend
    rhythm: MetricTrend

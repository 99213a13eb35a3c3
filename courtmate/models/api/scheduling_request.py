# courtmate/models/api/scheduling_request.py
"""
Scheduling API request models.
Used by routes for input validation.
"""

import datetime as dt

from pydantic import BaseModel, Field, model_validator


class BusyEventRequest(BaseModel):
    """A busy interval taken from the player's calendar."""

    start: dt.datetime = Field(..., description="Busy period start")
    end: dt.datetime = Field(..., description="Busy period end")
    summary: str = Field(default="", max_length=200, description="Optional event title")

    @model_validator(mode="after")
    def check_order(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class DayWindowRequest(BaseModel):
    """Local operating hours for candidate slots."""

    start_hour: int = Field(default=6, ge=0, le=23, description="First hour of the day window")
    end_hour: int = Field(default=22, ge=1, le=24, description="Hour the day window closes")


class MutualAvailabilityRequest(BaseModel):
    """Request for mutual availability with one opponent on one date."""

    opponent_id: str = Field(..., min_length=1, description="Opponent user ID")
    date: dt.date = Field(..., description="Date to check")
    slot_duration_minutes: int | None = Field(
        default=None, description="Candidate slot length (default 120)"
    )
    step_minutes: int | None = Field(
        default=None, description="Step between candidates (default 30)"
    )
    day_window: DayWindowRequest | None = Field(default=None, description="Operating hours")
    busy_events: list[BusyEventRequest] = Field(
        default_factory=list, description="Requesting player's busy events"
    )
    opponent_busy_events: list[BusyEventRequest] = Field(
        default_factory=list, description="Opponent's busy events"
    )
    calendar_events: list[dict] = Field(
        default_factory=list,
        description="Requesting player's raw Google Calendar events",
    )


class SuggestionsRequest(BaseModel):
    """Request for ranked match suggestions."""

    opponent_ids: list[str] | None = Field(
        default=None, description="Opponents to consider (default: stored recommendations)"
    )
    from_date: dt.date | None = Field(
        default=None, description="First date to search (default today)"
    )
    days_ahead: int | None = Field(default=None, ge=1, le=60, description="Days to search")
    max_results: int | None = Field(default=None, ge=1, le=50, description="Maximum suggestions")
    busy_events: list[BusyEventRequest] = Field(
        default_factory=list, description="Requesting player's busy events"
    )
    opponent_busy_events: dict[str, list[BusyEventRequest]] = Field(
        default_factory=dict, description="Busy events keyed by opponent ID"
    )
    calendar_events: list[dict] = Field(
        default_factory=list, description="Requesting player's raw Google Calendar events"
    )

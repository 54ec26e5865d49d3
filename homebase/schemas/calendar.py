from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime


class EventCreate(BaseModel):
    """Schema for creating a calendar event."""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=200)
    start_at: datetime
    end_at: datetime
    all_day: bool = False

    @model_validator(mode="after")
    def check_interval(self):
        if (self.start_at.tzinfo is None) != (self.end_at.tzinfo is None):
            raise ValueError("start_at and end_at must both include a timezone or both omit it")
        if self.end_at < self.start_at:
            raise ValueError("end_at must not be before start_at")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    location: Optional[str] = Field(None, max_length=200)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    all_day: Optional[bool] = None

    @field_validator("title", "start_at", "end_at", "all_day")
    @classmethod
    def not_null(cls, v):
        # May be left out, but an explicit null would clear a required column
        if v is None:
            raise ValueError("Field may be omitted but not set to null")
        return v


class EventResponse(BaseModel):
    id: int
    uuid: str
    household_id: int
    title: str
    description: Optional[str]
    location: Optional[str]
    start_at: datetime
    end_at: datetime
    all_day: bool
    created_by_id: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class ConflictResolve(BaseModel):
    resolution_notes: Optional[str] = Field(None, max_length=1000)


class ConflictResponse(BaseModel):
    id: int
    household_id: int
    conflict_type: str
    event_id: int
    conflicting_event_id: int
    resolved: bool
    resolution_notes: Optional[str]
    resolved_at: Optional[datetime]
    resolved_by_id: Optional[str]

    model_config = ConfigDict(from_attributes=True)

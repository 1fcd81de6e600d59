from __future__ import annotations
import datetime as dt
from typing import Optional

from pydantic import AliasChoices, Field, model_validator

from blueprints.core.schemas import ApiModel, PatchModel

# фронт присылает группу и как "group", и как "groupId"
_GROUP_ALIASES = AliasChoices("groupId", "group", "group_id")

class ScheduleIn(ApiModel):
    group_id: int = Field(validation_alias=_GROUP_ALIASES)
    title: str = Field("Training", min_length=1, max_length=255)
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self

class SchedulePatch(PatchModel):
    NOT_NULL = ("group_id", "title", "date", "start_time", "end_time")

    group_id: Optional[int] = Field(None, validation_alias=_GROUP_ALIASES)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)

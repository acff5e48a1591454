"""Manual refresh job model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from kubesnap.constants.enums import JobState


class ManualRefreshJob(BaseModel):
    """Lifecycle record of one manual refresh request."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str = Field(alias="jobId")
    domain: str
    scope: str = ""
    reason: str = ""
    state: JobState = JobState.QUEUED
    queued_at: int = 0
    started_at: int = 0
    finished_at: int = 0
    error: str = ""
    latest_version: int = 0

"""Launch progress Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.progress import PIPELINES, PipelineStatus, column_name

NON_NULLABLE_FIELDS = ("status", "progress")


class PipelineState(BaseModel):
    """Current state of one delivery pipeline."""

    model_config = ConfigDict(from_attributes=True)

    status: PipelineStatus = Field(default=PipelineStatus.PENDING, description="Pipeline status")
    progress: int = Field(default=0, description="Completion percentage (0-100)")
    current_step: str | None = Field(default=None, description="What the team is working on")
    next_step: str | None = Field(default=None, description="What comes next")


class PipelinePatch(BaseModel):
    """Partial update for one pipeline.

    Status and progress are independent; setting one does not change
    the other.
    """

    model_config = ConfigDict(extra="forbid")

    status: PipelineStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    current_step: str | None = Field(default=None, max_length=500)
    next_step: str | None = Field(default=None, max_length=500)


class ProgressUpdate(BaseModel):
    """Schema for PATCH /admin/progress/{progress_id}."""

    model_config = ConfigDict(extra="forbid")

    logo: PipelinePatch | None = None
    website: PipelinePatch | None = None
    social_media: PipelinePatch | None = None
    company: PipelinePatch | None = None
    invoicing: PipelinePatch | None = None
    signature: PipelinePatch | None = None

    def to_columns(self) -> dict[str, Any]:
        """Flatten the patch into launch_progress column updates.

        An explicit null clears current_step or next_step. Status and
        progress columns are not nullable, so a null there is ignored.
        """
        columns: dict[str, Any] = {}
        patches = self.model_dump(mode="json", exclude_unset=True)
        for pipeline, fields in patches.items():
            if not fields:
                continue
            for field, value in fields.items():
                if value is None and field in NON_NULLABLE_FIELDS:
                    continue
                columns[column_name(pipeline, field)] = value
        return columns


class ProgressResponse(BaseModel):
    """Schema for progress API responses, one entry per pipeline."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Progress tracker ID")
    launch_request_id: UUID = Field(description="Launch request this tracker belongs to")
    logo: PipelineState
    website: PipelineState
    social_media: PipelineState
    company: PipelineState
    invoicing: PipelineState
    signature: PipelineState
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ProgressResponse":
        """Build the nested response from a flat launch_progress row."""
        pipelines = {
            pipeline: PipelineState(
                status=row.get(column_name(pipeline, "status")) or PipelineStatus.PENDING,
                progress=row.get(column_name(pipeline, "progress")) or 0,
                current_step=row.get(column_name(pipeline, "current_step")),
                next_step=row.get(column_name(pipeline, "next_step")),
            )
            for pipeline in PIPELINES
        }
        return cls(
            id=row["id"],
            launch_request_id=row["launch_request_id"],
            updated_at=row.get("updated_at"),
            **pipelines,
        )

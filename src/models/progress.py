"""Launch progress model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class PipelineStatus(str, Enum):
    """Delivery pipeline status values matching database enum."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Column prefixes on launch_progress, in display order.
PIPELINES: tuple[str, ...] = (
    "logo",
    "website",
    "social_media",
    "company",
    "invoicing",
    "signature",
)

PIPELINE_FIELDS: tuple[str, ...] = ("status", "progress", "current_step", "next_step")

# (current_step, next_step) seeded when a launch is started.
DEFAULT_PIPELINE_STEPS: dict[str, tuple[str, str]] = {
    "logo": ("Revisión inicial de brief", "Desarrollo de conceptos creativos"),
    "website": ("Análisis de requerimientos", "Diseño de wireframes"),
    "social_media": ("Configuración de perfiles", "Estrategia de contenido"),
    "company": ("Revisión de documentación", "Preparación de estatutos"),
    "invoicing": ("Registro en SRI", "Configuración del sistema"),
    "signature": ("Solicitud de certificado", "Instalación y activación"),
}


def column_name(pipeline: str, field: str) -> str:
    """Return the launch_progress column for a pipeline field."""
    return f"{pipeline}_{field}"


class LaunchProgress(TypedDict):
    """Launch progress table row representation.

    Six independent pipelines stored as flat columns
    ({pipeline}_status, {pipeline}_progress, {pipeline}_current_step,
    {pipeline}_next_step). Status and progress are not required to agree.
    """

    id: UUID
    launch_request_id: UUID
    version: int

    logo_status: PipelineStatus
    logo_progress: int
    logo_current_step: str | None
    logo_next_step: str | None

    website_status: PipelineStatus
    website_progress: int
    website_current_step: str | None
    website_next_step: str | None

    social_media_status: PipelineStatus
    social_media_progress: int
    social_media_current_step: str | None
    social_media_next_step: str | None

    company_status: PipelineStatus
    company_progress: int
    company_current_step: str | None
    company_next_step: str | None

    invoicing_status: PipelineStatus
    invoicing_progress: int
    invoicing_current_step: str | None
    invoicing_next_step: str | None

    signature_status: PipelineStatus
    signature_progress: int
    signature_current_step: str | None
    signature_next_step: str | None

    created_at: datetime
    updated_at: datetime


def initial_progress_row(launch_request_id: str) -> dict[str, object]:
    """Build the insert payload for a freshly started launch."""
    row: dict[str, object] = {"launch_request_id": launch_request_id}
    for pipeline in PIPELINES:
        current_step, next_step = DEFAULT_PIPELINE_STEPS[pipeline]
        row[column_name(pipeline, "status")] = PipelineStatus.PENDING.value
        row[column_name(pipeline, "progress")] = 0
        row[column_name(pipeline, "current_step")] = current_step
        row[column_name(pipeline, "next_step")] = next_step
    return row

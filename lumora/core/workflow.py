"""
Content workflow stages.

Every content item moves through the same seven stages, in order.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from lumora.core.enums import ContentStatus


@dataclass(frozen=True)
class WorkflowStage:
    key: str
    label: str
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


WORKFLOW_STAGES: tuple[WorkflowStage, ...] = (
    WorkflowStage(ContentStatus.IDEA.value, "Idea", "Topic selected and aligned with brand goals."),
    WorkflowStage(ContentStatus.PROMPTED.value, "Prompted", "Prompt stack prepared and reviewed."),
    WorkflowStage(ContentStatus.GENERATED.value, "Generated", "First video/script render completed."),
    WorkflowStage(ContentStatus.ENHANCED.value, "Enhanced", "Edits, captions, and overlays polished."),
    WorkflowStage(ContentStatus.QC.value, "QC", "Quality control checklist cleared."),
    WorkflowStage(ContentStatus.SCHEDULED.value, "Scheduled", "Campaign scheduled on the target platform."),
    WorkflowStage(ContentStatus.PUBLISHED.value, "Published", "Content is live and ready for analytics."),
)

STAGE_KEYS: tuple[str, ...] = tuple(stage.key for stage in WORKFLOW_STAGES)


def is_stage_key(value: str | None) -> bool:
    return value in STAGE_KEYS


def get_stage_meta(key: str | None) -> WorkflowStage:
    """Return the stage for key, falling back to the first stage."""
    for stage in WORKFLOW_STAGES:
        if stage.key == key:
            return stage
    return WORKFLOW_STAGES[0]

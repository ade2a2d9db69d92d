"""Canonical plan models shared by every generation path."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["high", "medium", "low"]
PRIORITIES: tuple[str, ...] = ("high", "medium", "low")

DEFAULT_TITLE = "Generated Project Plan"
DEFAULT_OVERVIEW = "No overview provided"
DEFAULT_ESTIMATE = "TBD"


class _CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileStructureItem(_CamelModel):
    """A file or directory node in the proposed project tree."""

    name: str
    type: Literal["file", "directory"]
    path: str
    description: str | None = None
    children: list[FileStructureItem] | None = None

    @property
    def is_directory(self) -> bool:
        return self.type == "directory"


class PlanStep(_CamelModel):
    """A single actionable next step."""

    id: str
    description: str
    completed: bool = False
    priority: Priority = "medium"
    estimated_time: str = DEFAULT_ESTIMATE
    dependencies: list[str] = []


class ProjectPlan(_CamelModel):
    """A fully populated plan, created fresh for each generation call.

    ``document`` holds the verbatim reply of a Markdown-producing provider;
    the structured fields are then a best-effort projection of it.
    """

    title: str
    overview: str
    requirements: list[str] = []
    file_structure: list[FileStructureItem] = []
    next_steps: list[PlanStep] = []
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    generated_by: Literal["ai", "rules"]
    provider: str | None = None
    model: str | None = None
    document: str | None = None


class PlanTemplate(_CamelModel):
    """Seed plan used by the offline generator, selected by keyword hits."""

    model_config = ConfigDict(frozen=True)

    keywords: tuple[str, ...]
    title: str
    overview: str
    requirements: tuple[str, ...]
    file_structure: tuple[FileStructureItem, ...]
    next_steps: tuple[PlanStep, ...]

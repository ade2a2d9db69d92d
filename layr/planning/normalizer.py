"""Turn a raw AI reply into a canonical ProjectPlan.

AI replies are untrusted text. The only hard failures are "no JSON object
found" and "not parseable as JSON"; every structurally present but
wrongly typed field is replaced by a safe default.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from layr.errors import AIServiceError
from layr.planning.models import (
    DEFAULT_ESTIMATE,
    DEFAULT_OVERVIEW,
    DEFAULT_TITLE,
    PRIORITIES,
    FileStructureItem,
    PlanStep,
    ProjectPlan,
)

_TRUE_STRINGS = {"true", "yes", "1"}


def extract_json(text: str) -> Any:
    """Parse the span from the first ``{`` to the last ``}``, ignoring surrounding commentary."""
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        raise AIServiceError("Invalid response format")
    try:
        return json.loads(text[start : end + 1])
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals and runaway nesting alike
        raise AIServiceError(f"Failed to parse AI response as JSON: {e}", e) from e


def parse_plan_response(
    text: str,
    generated_by: Literal["ai", "rules"] = "ai",
    provider: str | None = None,
    model: str | None = None,
) -> ProjectPlan:
    """Extract, parse and normalize a raw reply in one step."""
    data = extract_json(text)
    try:
        return normalize_plan(data, generated_by, provider=provider, model=model)
    except RecursionError as e:
        raise AIServiceError("AI response file structure is nested too deeply", e) from e


def normalize_plan(
    data: Any,
    generated_by: Literal["ai", "rules"] = "ai",
    provider: str | None = None,
    model: str | None = None,
) -> ProjectPlan:
    if not isinstance(data, dict):
        data = {}

    return ProjectPlan(
        title=_text_or(data.get("title"), DEFAULT_TITLE),
        overview=_text_or(data.get("overview"), DEFAULT_OVERVIEW),
        requirements=normalize_requirements(data.get("requirements")),
        file_structure=normalize_file_structure(data.get("fileStructure")),
        next_steps=normalize_steps(data.get("nextSteps")),
        generated_by=generated_by,
        provider=provider,
        model=model,
    )


def normalize_requirements(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if _is_scalar(item) and str(item).strip()]


def normalize_file_structure(items: Any) -> list[FileStructureItem]:
    """Coerce a listing of nodes; later siblings repeating a path are dropped."""
    if not isinstance(items, list):
        return []

    result: list[FileStructureItem] = []
    seen_paths: set[str] = set()
    for index, raw in enumerate(items):
        node = normalize_file_item(raw, index)
        if node.path in seen_paths:
            continue
        seen_paths.add(node.path)
        result.append(node)
    return result


def normalize_file_item(raw: Any, index: int) -> FileStructureItem:
    if not isinstance(raw, dict):
        raw = {}

    name = _text_or(raw.get("name"), f"item-{index}")
    node_type = "directory" if raw.get("type") == "directory" else "file"
    path = _text_or(raw.get("path"), name)
    description = raw.get("description")

    children = None
    if node_type == "directory" and "children" in raw:
        children = normalize_file_structure(raw.get("children"))

    return FileStructureItem(
        name=name,
        type=node_type,
        path=path,
        description=description.strip() if isinstance(description, str) and description.strip() else None,
        children=children,
    )


def normalize_steps(steps: Any) -> list[PlanStep]:
    """Coerce next steps. Ids are made unique; dependencies are left unchecked."""
    if not isinstance(steps, list):
        return []

    result: list[PlanStep] = []
    used_ids: set[str] = set()
    for index, raw in enumerate(steps, start=1):
        if not isinstance(raw, dict):
            raw = {}

        step_id = _text_or(raw.get("id"), f"step-{index}")
        if step_id in used_ids:
            step_id = _unique_id(f"step-{index}", used_ids)
        used_ids.add(step_id)

        priority = raw.get("priority")
        result.append(
            PlanStep(
                id=step_id,
                description=_text_or(raw.get("description"), f"Step {index}"),
                completed=_coerce_bool(raw.get("completed")),
                priority=priority if priority in PRIORITIES else "medium",
                estimated_time=_text_or(raw.get("estimatedTime"), DEFAULT_ESTIMATE),
                dependencies=_normalize_dependencies(raw.get("dependencies")),
            )
        )
    return result


def _normalize_dependencies(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    deps: list[str] = []
    for item in value:
        dep = str(item).strip() if _is_scalar(item) else ""
        if dep and dep not in deps:
            deps.append(dep)
    return deps


def _unique_id(candidate: str, used: set[str]) -> str:
    if candidate not in used:
        return candidate
    suffix = 2
    while f"{candidate}-{suffix}" in used:
        suffix += 1
    return f"{candidate}-{suffix}"


def _text_or(value: Any, default: str) -> str:
    if _is_scalar(value) and str(value).strip():
        return str(value).strip()
    return default


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str | int | float) and not isinstance(value, bool)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)

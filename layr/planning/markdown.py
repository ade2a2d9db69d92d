"""Markdown rendering of plans, and projection of Markdown replies into plans."""

from __future__ import annotations

import re

from layr.planning.models import (
    DEFAULT_ESTIMATE,
    DEFAULT_OVERVIEW,
    DEFAULT_TITLE,
    FileStructureItem,
    PlanStep,
    Priority,
    ProjectPlan,
)

PRIORITY_MARKERS: dict[Priority, str] = {"high": "🔴", "medium": "🟡", "low": "🟢"}

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_BULLET = re.compile(r"^\s*[-*+]\s+(?:\[[ xX]\]\s+)?(.+)$")
_NUMBERED = re.compile(r"^\s*(\d+)[.)]\s+(.+)$")
_ESTIMATE = re.compile(r"\(([^()]*\d[^()]*)\)\s*$")
_DEPENDS = re.compile(r"^\s*[-*+]\s+\*{0,2}depends on:?\*{0,2}\s*(.*?)\s*\*{0,2}$", re.IGNORECASE)
_STEP_REF = re.compile(r"^(?:step[\s-]*)?#?(\d+)$", re.IGNORECASE)
_TREE_LINE = re.compile(r"^(?P<indent>(?:[│|]\s{2,3}|\s{3,4})*)(?:[├└]──|[|`]--)\s*(?P<name>.+)$")


def plan_to_markdown(plan: ProjectPlan) -> str:
    """Render a plan as a Markdown document.

    Plans carrying a provider ``document`` are returned verbatim.
    """
    if plan.document:
        return plan.document

    lines = [f"# {plan.title}", "", "## Overview", "", plan.overview, ""]

    lines += ["## Requirements", ""]
    lines += [f"- {req}" for req in plan.requirements] or ["_No requirements listed._"]
    lines.append("")

    lines += ["## File Structure", ""]
    if plan.file_structure:
        lines.append("```")
        lines += render_tree(plan.file_structure)
        lines.append("```")
    else:
        lines.append("_No file structure proposed._")
    lines.append("")

    lines += ["## Next Steps", ""]
    if not plan.next_steps:
        lines.append("_No next steps proposed._")
    for step in plan.next_steps:
        box = "x" if step.completed else " "
        marker = PRIORITY_MARKERS[step.priority]
        lines.append(f"- [{box}] {marker} **{step.description}** ({step.estimated_time})")
        if step.dependencies:
            lines.append(f"  - *Depends on: {', '.join(step.dependencies)}*")
    lines.append("")

    source = "AI" if plan.generated_by == "ai" else "built-in templates"
    if plan.provider:
        source += f" ({plan.provider}" + (f"/{plan.model})" if plan.model else ")")
    lines += ["---", "", f"*Generated by {source} at {plan.generated_at.isoformat()}*", ""]
    return "\n".join(lines)


def render_tree(items: list[FileStructureItem], prefix: str = "") -> list[str]:
    lines: list[str] = []
    for i, item in enumerate(items):
        last = i == len(items) - 1
        connector = "└── " if last else "├── "
        name = item.name + "/" if item.is_directory and not item.name.endswith("/") else item.name
        line = f"{prefix}{connector}{name}"
        if item.description:
            line += f"  # {item.description}"
        lines.append(line)
        if item.children:
            lines += render_tree(item.children, prefix + ("    " if last else "│   "))
    return lines


def markdown_to_plan(
    document: str, provider: str | None = None, model: str | None = None
) -> ProjectPlan:
    """Project a long-form Markdown reply onto the canonical plan shape.

    The document itself is kept verbatim on the returned plan.
    """
    title = DEFAULT_TITLE
    sections: dict[str, list[str]] = {}
    current: str | None = None

    for line in document.splitlines():
        heading = _HEADING.match(line)
        if heading and not _in_fence(sections.get(current or "", [])):
            level, text = len(heading.group(1)), heading.group(2).strip()
            if level == 1 and title == DEFAULT_TITLE and text:
                title = text
                current = None
                continue
            if level == 2:
                current = text.lower()
                sections.setdefault(current, [])
                continue
        if current is not None:
            sections[current].append(line)

    overview = _paragraphs(sections.get("overview", [])) or DEFAULT_OVERVIEW
    requirements = [
        m.group(1).strip() for line in sections.get("requirements", []) if (m := _BULLET.match(line))
    ]

    return ProjectPlan(
        title=title,
        overview=overview,
        requirements=requirements,
        file_structure=parse_tree(_first_fence(sections.get("file structure", []))),
        next_steps=_parse_steps(sections.get("next steps", [])),
        generated_by="ai",
        provider=provider,
        model=model,
        document=document,
    )


def parse_tree(lines: list[str]) -> list[FileStructureItem]:
    """Parse an ``├──``/``└──`` diagram; a leading unconnected line is the synthetic root."""
    roots: list[FileStructureItem] = []
    stack: list[tuple[int, FileStructureItem]] = []

    for raw in lines:
        match = _TREE_LINE.match(raw.rstrip())
        if not match:
            continue
        depth = len(match.group("indent")) // 4
        name = match.group("name").split("#", 1)
        label = name[0].strip()
        if not label:
            continue
        description = name[1].strip() if len(name) > 1 and name[1].strip() else None
        is_dir = label.endswith("/")
        label = label.rstrip("/")

        while stack and stack[-1][0] >= depth:
            stack.pop()
        parent = stack[-1][1] if stack else None
        base = parent.path if parent else ""
        node = FileStructureItem(
            name=label,
            type="directory" if is_dir else "file",
            path=f"{base}{label}/" if is_dir else f"{base}{label}",
            description=description,
            children=[] if is_dir else None,
        )

        # Only directories are pushed, so a parent always has a children list.
        siblings = roots if parent is None else parent.children
        existing = next((s for s in siblings if s.path == node.path), None)
        if existing is None:
            siblings.append(node)
            existing = node
        if existing.is_directory:
            stack.append((depth, existing))

    return roots


def _parse_steps(lines: list[str]) -> list[PlanStep]:
    steps: list[PlanStep] = []
    for line in lines:
        if steps and (depends := _DEPENDS.match(line)):
            steps[-1].dependencies.extend(_step_refs(depends.group(1)))
            continue
        match = _NUMBERED.match(line)
        if not match:
            continue
        text = match.group(2).strip()
        priority: Priority = "medium"
        for level, marker in PRIORITY_MARKERS.items():
            if marker in text:
                priority = level
                text = text.replace(marker, "")
        estimate = DEFAULT_ESTIMATE
        if est := _ESTIMATE.search(text):
            estimate = est.group(1).strip()
            text = text[: est.start()]
        description = text.replace("**", "").strip()
        steps.append(
            PlanStep(
                id=f"step-{len(steps) + 1}",
                description=description or f"Step {len(steps) + 1}",
                priority=priority,
                estimated_time=estimate,
            )
        )
    return steps


def _step_refs(text: str) -> list[str]:
    """``2, Step 3`` becomes ``["step-2", "step-3"]``; other names are kept as written."""
    refs = []
    for part in text.split(","):
        name = part.strip(" .*_")
        if not name or name.lower() in ("none", "n/a", "-"):
            continue
        if number := _STEP_REF.match(name):
            name = f"step-{int(number.group(1))}"
        if name not in refs:
            refs.append(name)
    return refs


def _paragraphs(lines: list[str]) -> str:
    return "\n".join(lines).strip()


def _first_fence(lines: list[str]) -> list[str]:
    inside = False
    block: list[str] = []
    for line in lines:
        if line.strip().startswith("```"):
            if inside:
                return block
            inside = True
            continue
        if inside:
            block.append(line)
    return block


def _in_fence(lines: list[str]) -> bool:
    return sum(1 for line in lines if line.strip().startswith("```")) % 2 == 1

"""Tests for Markdown rendering and Markdown reply projection."""

from __future__ import annotations

from layr.planning.markdown import markdown_to_plan, parse_tree, plan_to_markdown, render_tree
from layr.planning.models import DEFAULT_ESTIMATE, DEFAULT_OVERVIEW, DEFAULT_TITLE, ProjectPlan
from layr.planning.normalizer import normalize_plan
from layr.planning.rules import RuleBasedGenerator

from conftest import SAMPLE_PLAN

RELAY_REPLY = """\
# Recipe Sharing Platform

## Overview

A place to share and rate recipes.

Built for home cooks.

## Requirements

- User accounts
- Recipe CRUD
* Ratings

## File Structure

```
project-root/
├── backend/
│   ├── app.py  # Flask entry point
│   └── models/
│       └── recipe.py
├── frontend/
│   └── index.html
└── README.md
```

## Next Steps

1. 🔴 **Set up the repository** (30 minutes)
   - *Depends on: None*
2. 🟡 **Design the database schema** (2 hours)
   - *Depends on: Step 1*
3. 🟢 Write the README
"""


class TestPlanToMarkdown:
    def test_sections(self) -> None:
        plan = normalize_plan(SAMPLE_PLAN, provider="openai", model="gpt-4o")
        text = plan_to_markdown(plan)
        assert text.startswith("# Todo App\n")
        for heading in ("## Overview", "## Requirements", "## File Structure", "## Next Steps"):
            assert heading in text
        assert "- Add tasks" in text
        assert "├── src/  # Source code" in text
        assert "│   └── main.py" in text
        assert "└── README.md" in text
        assert "- [ ] 🔴 **Set up the project** (30 minutes)" in text
        assert "*Depends on: setup*" in text
        assert "Generated by AI (openai/gpt-4o)" in text

    def test_rules_footer(self) -> None:
        plan = RuleBasedGenerator().generate_plan("a website")
        assert "Generated by built-in templates at" in plan_to_markdown(plan)

    def test_empty_plan(self) -> None:
        text = plan_to_markdown(ProjectPlan(title="Empty", overview="Nothing", generated_by="ai"))
        assert "_No requirements listed._" in text
        assert "_No file structure proposed._" in text
        assert "_No next steps proposed._" in text

    def test_document_returned_verbatim(self) -> None:
        plan = markdown_to_plan(RELAY_REPLY)
        assert plan_to_markdown(plan) == RELAY_REPLY

    def test_completed_checkbox(self) -> None:
        data = {"title": "T", "nextSteps": [{"description": "Done", "completed": True}]}
        assert "- [x] 🟡 **Done** (TBD)" in plan_to_markdown(normalize_plan(data))


class TestRenderTree:
    def test_nested_prefixes(self) -> None:
        plan = normalize_plan(
            {
                "fileStructure": [
                    {
                        "name": "a",
                        "type": "directory",
                        "children": [
                            {"name": "b", "type": "directory", "children": [{"name": "c.txt"}]},
                            {"name": "d.txt"},
                        ],
                    },
                    {"name": "e.txt"},
                ]
            }
        )
        assert render_tree(plan.file_structure) == [
            "├── a/",
            "│   ├── b/",
            "│   │   └── c.txt",
            "│   └── d.txt",
            "└── e.txt",
        ]


class TestMarkdownToPlan:
    def test_projection(self) -> None:
        plan = markdown_to_plan(RELAY_REPLY, provider="groq", model="llama-3.3-70b-versatile")
        assert plan.title == "Recipe Sharing Platform"
        assert plan.overview == "A place to share and rate recipes.\n\nBuilt for home cooks."
        assert plan.requirements == ["User accounts", "Recipe CRUD", "Ratings"]
        assert plan.generated_by == "ai"
        assert plan.provider == "groq"
        assert plan.document == RELAY_REPLY

    def test_file_structure(self) -> None:
        plan = markdown_to_plan(RELAY_REPLY)
        assert [item.name for item in plan.file_structure] == ["backend", "frontend", "README.md"]
        backend = plan.file_structure[0]
        assert backend.type == "directory"
        assert backend.path == "backend/"
        assert [c.name for c in backend.children] == ["app.py", "models"]
        assert backend.children[0].description == "Flask entry point"
        assert backend.children[1].children[0].path == "backend/models/recipe.py"
        assert plan.file_structure[2].type == "file"

    def test_next_steps(self) -> None:
        steps = markdown_to_plan(RELAY_REPLY).next_steps
        assert [s.id for s in steps] == ["step-1", "step-2", "step-3"]
        assert [s.priority for s in steps] == ["high", "medium", "low"]
        assert steps[0].description == "Set up the repository"
        assert steps[0].estimated_time == "30 minutes"
        assert steps[2].estimated_time == DEFAULT_ESTIMATE
        assert [s.dependencies for s in steps] == [[], ["step-1"], []]

    def test_dependency_lines(self) -> None:
        reply = (
            "## Next Steps\n"
            "1. **Pick a stack** (1 hour)\n"
            "2. **Scaffold** (2 hours)\n"
            "   - **Depends on:** 1, Choose hosting, step 1\n"
            "   - Install the linter\n"
            "3. **Ship**\n"
            "   - Depends on: Step 2, step-1\n"
        )
        steps = markdown_to_plan(reply).next_steps
        assert [s.dependencies for s in steps] == [[], ["step-1", "Choose hosting"], ["step-2", "step-1"]]

    def test_dependency_line_before_any_step(self) -> None:
        steps = markdown_to_plan("## Next Steps\n- *Depends on: 4*\n1. Begin\n").next_steps
        assert [s.dependencies for s in steps] == [[]]

    def test_unstructured_reply(self) -> None:
        plan = markdown_to_plan("Sorry, I could not produce a plan today.")
        assert plan.title == DEFAULT_TITLE
        assert plan.overview == DEFAULT_OVERVIEW
        assert plan.requirements == []
        assert plan.file_structure == []
        assert plan.next_steps == []
        assert plan.document == "Sorry, I could not produce a plan today."

    def test_headings_inside_fence_ignored(self) -> None:
        reply = "# Title\n\n## Next Steps\n\n```\n## not a heading\n```\n1. Real step\n"
        plan = markdown_to_plan(reply)
        assert [s.description for s in plan.next_steps] == ["Real step"]


class TestParseTree:
    def test_ascii_connectors(self) -> None:
        nodes = parse_tree(["|-- src/", "|   `-- main.py", "`-- setup.py"])
        assert [n.name for n in nodes] == ["src", "setup.py"]
        assert nodes[0].children[0].path == "src/main.py"

    def test_duplicate_directories_merge(self) -> None:
        nodes = parse_tree(["├── src/", "│   └── a.py", "├── src/", "│   └── b.py"])
        assert len(nodes) == 1
        assert [c.name for c in nodes[0].children] == ["a.py", "b.py"]

    def test_non_tree_lines_skipped(self) -> None:
        assert parse_tree(["project-root/", "", "just text"]) == []

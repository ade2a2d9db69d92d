"""Offline plan generation from keyword-matched templates."""

from __future__ import annotations

from layr.planning.models import FileStructureItem, PlanStep, PlanTemplate, Priority, ProjectPlan


def _dir(name: str, description: str) -> FileStructureItem:
    return FileStructureItem(name=name, type="directory", path=f"{name}/", description=description)


def _file(name: str, description: str) -> FileStructureItem:
    return FileStructureItem(name=name, type="file", path=name, description=description)


def _step(
    step_id: str, description: str, priority: Priority, estimate: str, *deps: str
) -> PlanStep:
    return PlanStep(
        id=step_id,
        description=description,
        priority=priority,
        estimated_time=estimate,
        dependencies=list(deps),
    )


# Declaration order matters: the first template wins ties and zero-match prompts.
TEMPLATES: tuple[PlanTemplate, ...] = (
    PlanTemplate(
        keywords=("web", "website", "frontend", "react", "vue", "angular", "html", "css", "javascript"),
        title="Web Application Project",
        overview="A modern web application with responsive design and interactive features",
        requirements=(
            "Responsive design for mobile and desktop",
            "Modern JavaScript framework (React/Vue/Angular)",
            "CSS preprocessing (Sass/Less)",
            "Build system (Webpack/Vite)",
            "Testing framework (Jest/Vitest)",
            "Code linting and formatting",
            "Version control with Git",
        ),
        file_structure=(
            _dir("src", "Source code directory"),
            _dir("public", "Static assets"),
            _dir("tests", "Test files"),
            _file("package.json", "Project dependencies"),
            _file("README.md", "Project documentation"),
            _file(".gitignore", "Git ignore rules"),
        ),
        next_steps=(
            _step("init", "Initialize project with package manager", "high", "10 minutes"),
            _step("framework", "Set up chosen framework", "high", "30 minutes", "init"),
            _step("styling", "Configure CSS preprocessing", "medium", "20 minutes", "framework"),
            _step("testing", "Set up testing framework", "medium", "25 minutes", "framework"),
            _step("build", "Configure build system", "high", "40 minutes", "framework"),
            _step("deploy", "Set up deployment pipeline", "low", "60 minutes", "build"),
        ),
    ),
    PlanTemplate(
        keywords=("api", "backend", "server", "node", "express", "fastapi", "django", "rest", "graphql"),
        title="Backend API Project",
        overview=(
            "A robust backend API with authentication, database integration, "
            "and comprehensive documentation"
        ),
        requirements=(
            "RESTful API design",
            "Database integration (SQL/NoSQL)",
            "Authentication and authorization",
            "Input validation and sanitization",
            "Error handling and logging",
            "API documentation (OpenAPI/Swagger)",
            "Unit and integration testing",
            "Environment configuration",
        ),
        file_structure=(
            _dir("src", "Source code directory"),
            _dir("tests", "Test files"),
            _dir("docs", "API documentation"),
            _dir("config", "Configuration files"),
            _file("package.json", "Project dependencies"),
            _file(".env.example", "Environment variables template"),
            _file("README.md", "Project documentation"),
        ),
        next_steps=(
            _step("setup", "Initialize project and install dependencies", "high", "15 minutes"),
            _step("server", "Set up basic server structure", "high", "30 minutes", "setup"),
            _step("database", "Configure database connection", "high", "45 minutes", "server"),
            _step("auth", "Implement authentication system", "high", "90 minutes", "database"),
            _step("endpoints", "Create API endpoints", "medium", "120 minutes", "auth"),
            _step("testing", "Write comprehensive tests", "medium", "60 minutes", "endpoints"),
            _step("docs", "Generate API documentation", "low", "30 minutes", "endpoints"),
        ),
    ),
    PlanTemplate(
        keywords=("mobile", "app", "react native", "flutter", "ios", "android", "native"),
        title="Mobile Application Project",
        overview="A cross-platform mobile application with native performance and modern UI/UX",
        requirements=(
            "Cross-platform compatibility (iOS/Android)",
            "Native performance optimization",
            "Responsive UI for different screen sizes",
            "Offline functionality and data sync",
            "Push notifications",
            "App store deployment preparation",
            "Testing on real devices",
        ),
        file_structure=(
            _dir("src", "Source code directory"),
            _dir("assets", "Images, fonts, and other assets"),
            _dir("tests", "Test files"),
            _dir("android", "Android-specific code"),
            _dir("ios", "iOS-specific code"),
            _file("package.json", "Project dependencies"),
            _file("app.json", "App configuration"),
        ),
        next_steps=(
            _step("init", "Initialize mobile project", "high", "20 minutes"),
            _step("navigation", "Set up navigation structure", "high", "45 minutes", "init"),
            _step("ui", "Create UI components and screens", "medium", "180 minutes", "navigation"),
            _step("state", "Implement state management", "medium", "60 minutes", "ui"),
            _step("api", "Integrate with backend APIs", "medium", "90 minutes", "state"),
            _step("testing", "Test on multiple devices", "high", "120 minutes", "api"),
            _step("deploy", "Prepare for app store submission", "low", "180 minutes", "testing"),
        ),
    ),
)


class RuleBasedGenerator:
    """Always-available generator; needs no network access or credential."""

    def __init__(self, templates: tuple[PlanTemplate, ...] = TEMPLATES) -> None:
        if not templates:
            raise ValueError("At least one plan template is required")
        self.templates = templates

    def select_template(self, prompt: str) -> PlanTemplate:
        """Pick the template with the most keyword hits; ties go to the earliest."""
        lowered = prompt.lower()
        best = self.templates[0]
        best_hits = 0
        for template in self.templates:
            hits = sum(1 for keyword in template.keywords if keyword in lowered)
            if hits > best_hits:
                best, best_hits = template, hits
        return best

    def generate_plan(self, prompt: str, template: PlanTemplate | None = None) -> ProjectPlan:
        """Build a plan from ``template``, or from the best match for ``prompt`` when none is given."""
        template = template or self.select_template(prompt)
        return ProjectPlan(
            title=customize_title(template.title, prompt),
            overview=customize_overview(template.overview, prompt),
            requirements=list(template.requirements),
            file_structure=[item.model_copy(deep=True) for item in template.file_structure],
            next_steps=[step.model_copy(deep=True) for step in template.next_steps],
            generated_by="rules",
        )


def customize_title(base_title: str, prompt: str) -> str:
    words = [word for word in prompt.split(" ") if len(word) > 2]
    project_name = " ".join(words[:3])
    if project_name:
        return f"{project_name} - {base_title}"
    return base_title


def customize_overview(base_overview: str, prompt: str) -> str:
    return f'{base_overview}. This plan was generated based on your request: "{prompt}"'

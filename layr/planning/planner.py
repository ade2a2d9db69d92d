"""Plan orchestration: choose AI or rule-based generation and normalize the result."""

from __future__ import annotations

from layr.config.settings import LayrSettings
from layr.errors import LayrError
from layr.llm import ProviderRegistry
from layr.llm.base import AIProvider, GenerateOptions
from layr.logging.events import EventLog, Phase
from layr.planning.markdown import markdown_to_plan
from layr.planning.models import ProjectPlan
from layr.planning.normalizer import parse_plan_response
from layr.planning.rules import RuleBasedGenerator


class Planner:
    """Generates canonical project plans.

    AI failures are raised to the caller unchanged; falling back to the
    templates after a failed AI call is the caller's decision, made
    explicitly through :meth:`generate_rule_based_plan`.
    """

    def __init__(
        self,
        settings: LayrSettings | None = None,
        registry: ProviderRegistry | None = None,
        rules: RuleBasedGenerator | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        self.settings = settings or LayrSettings()
        self.registry = registry or ProviderRegistry()
        self.rules = rules or RuleBasedGenerator()
        self.event_log = event_log

    def provider_for(self, provider_type: str, model: str | None = None) -> AIProvider:
        """Construct (or reuse) the provider for ``provider_type`` from settings."""
        return self.registry.create_provider(
            provider_type, self.settings.provider_config(provider_type, model)
        )

    async def select_provider(
        self, provider_type: str | None = None, model: str | None = None
    ) -> AIProvider | None:
        """Pick the AI provider to call, or None for the rule-based path.

        An explicit ``provider_type`` is always returned so a missing key
        surfaces as an error. A configured provider that is not ready is
        skipped in favour of the templates.
        """
        if provider_type:
            provider = self.provider_for(provider_type, model)
            self._emit(Phase.SELECT, "provider.selected", f"Using {provider.name} (requested)",
                       {"provider": provider.type})
            return provider

        configured = self.settings.default_provider()
        if configured is None:
            self._emit(Phase.SELECT, "provider.none", "No AI provider configured")
            return None

        provider = self.provider_for(configured, model)
        if not await provider.is_available():
            self._emit(Phase.SELECT, "provider.unavailable",
                       f"{provider.name} is not ready; using built-in templates",
                       {"provider": provider.type})
            return None

        self._emit(Phase.SELECT, "provider.selected", f"Using {provider.name}",
                   {"provider": provider.type})
        return provider

    async def generate_plan(
        self,
        prompt: str,
        provider: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> ProjectPlan:
        selected = await self.select_provider(provider, model)
        if selected is None:
            return self.generate_rule_based_plan(prompt)
        return await self.generate_with_provider(
            selected, prompt, GenerateOptions(model=model, max_tokens=max_tokens)
        )

    async def generate_with_provider(
        self, provider: AIProvider, prompt: str, options: GenerateOptions | None = None
    ) -> ProjectPlan:
        """One AI attempt: call, then normalize. Errors propagate unchanged."""
        model = provider.resolve_model(options)
        data = {"provider": provider.type, "model": model}
        self._emit(Phase.GENERATE, "generation.start", f"Requesting plan from {provider.name}", data)

        try:
            raw = await provider.generate_plan(prompt, options)
            self._emit(Phase.GENERATE, "generation.reply", "Received reply",
                       data, {"length": len(raw), "format": provider.output_format})

            if provider.output_format == "markdown":
                plan = markdown_to_plan(raw, provider=provider.type, model=model)
            else:
                plan = parse_plan_response(raw, "ai", provider=provider.type, model=model)
        except LayrError as e:
            self._emit(Phase.GENERATE, "generation.failed", e.message, data, {"kind": str(e.kind)})
            raise

        self._emit(Phase.NORMALIZE, "generation.complete", plan.title, data, _plan_stats(plan))
        return plan

    def generate_rule_based_plan(self, prompt: str) -> ProjectPlan:
        template = self.rules.select_template(prompt)
        plan = self.rules.generate_plan(prompt, template)
        self._emit(Phase.RULES, "generation.complete", plan.title,
                   {"template": template.title}, _plan_stats(plan))
        return plan

    def _emit(self, phase: Phase, event_type: str, summary: str,
              data: dict | None = None, result: dict | None = None) -> None:
        if self.event_log is not None:
            self.event_log.emit(phase, event_type, summary, data, result)


def _plan_stats(plan: ProjectPlan) -> dict[str, int | str]:
    return {
        "generated_by": plan.generated_by,
        "requirements": len(plan.requirements),
        "files": len(plan.file_structure),
        "steps": len(plan.next_steps),
    }

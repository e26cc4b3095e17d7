"""Provider table and task routing matrix.

Tables are immutable. load_provider_config() reads API keys once at startup and
returns a frozen ProviderConfig that is injected into the Router.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType

PROVIDERS = MappingProxyType({
    "grok": MappingProxyType({
        "name": "Grok (xAI)",
        "base_url": "https://api.x.ai/v1/chat/completions",
        "models": MappingProxyType({
            "fast": "grok-3-mini-fast",
            "code": "grok-3-fast",
            "vision": "grok-2-vision-1212",
        }),
        "max_tokens": 16000,
        "api": "openai",
        "env": "GROK_API_KEY",
    }),
    "gemini": MappingProxyType({
        "name": "Gemini (Google)",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
        "models": MappingProxyType({
            "pro": "gemini-1.5-pro",
            "flash": "gemini-1.5-flash",
            "planning": "gemini-1.5-pro",
        }),
        "max_tokens": 16000,
        "api": "openai",
        "env": "GEMINI_API_KEY",
    }),
    "openai": MappingProxyType({
        "name": "OpenAI",
        "base_url": "https://api.openai.com/v1/chat/completions",
        "models": MappingProxyType({
            "gpt4o": "gpt-4o",
            "reasoning": "gpt-4o",
            "mini": "gpt-4o-mini",
        }),
        "max_tokens": 16000,
        "api": "openai",
        "env": "OPENAI_API_KEY",
    }),
    "anthropic": MappingProxyType({
        "name": "Anthropic",
        "base_url": "",
        "models": MappingProxyType({
            "sonnet": "claude-sonnet-4-5-20250929",
            "haiku": "claude-haiku-4-5",
        }),
        "max_tokens": 16000,
        "api": "anthropic",
        "env": "ANTHROPIC_API_KEY",
    }),
})

# task -> (provider, model alias, confidence threshold, fallback provider, fallback alias)
TASK_ROUTING = MappingProxyType({
    "intent": ("gemini", "flash", 0.85, "openai", "mini"),
    "planning": ("gemini", "planning", 0.80, "openai", "gpt4o"),
    "coding": ("grok", "code", 0.75, "openai", "gpt4o"),
    "validation": ("openai", "mini", 0.90, "grok", "fast"),
    "repair": ("openai", "gpt4o", 0.80, "grok", "code"),
    "persona": ("openai", "mini", 0.70, "gemini", "flash"),
})

TASK_TYPES = tuple(TASK_ROUTING)


@dataclass(frozen=True)
class ProviderSpec:
    key: str
    name: str
    base_url: str
    models: MappingProxyType
    max_tokens: int
    api: str                                    # "openai" or "anthropic"
    api_key: str = field(default="", repr=False)

    @property
    def default_model(self) -> str:
        return next(iter(self.models.values()))

    def resolve_model(self, alias: str) -> str:
        """Map a routing alias ("flash") to a model id; unknown aliases pass through."""
        return self.models.get(alias, alias)


@dataclass(frozen=True)
class ModelRef:
    provider: str
    model: str


@dataclass(frozen=True)
class RoutingEntry:
    provider: str
    model: str
    confidence_threshold: float
    fallback: ModelRef | None = None


@dataclass(frozen=True)
class ProviderConfig:
    providers: tuple = ()                       # configured ProviderSpec, table order
    routing: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def get(self, key: str) -> ProviderSpec | None:
        for spec in self.providers:
            if spec.key == key:
                return spec
        return None

    def has_any(self) -> bool:
        return bool(self.providers)

    def available(self) -> list[str]:
        return [spec.key for spec in self.providers]


def build_routing(thresholds=None) -> MappingProxyType:
    """Return the routing matrix as RoutingEntry records, with threshold overrides."""
    thresholds = thresholds or {}
    entries = {}
    for task, (provider, model, threshold, fb_provider, fb_model) in TASK_ROUTING.items():
        entries[task] = RoutingEntry(
            provider=provider,
            model=model,
            confidence_threshold=float(thresholds.get(task, threshold)),
            fallback=ModelRef(fb_provider, fb_model) if fb_provider else None,
        )
    return MappingProxyType(entries)


def _env_thresholds(environ) -> dict:
    overrides = {}
    for task in TASK_TYPES:
        raw = environ.get(f"PIPELINE_THRESHOLD_{task.upper()}")
        if not raw:
            continue
        try:
            overrides[task] = float(raw)
        except ValueError:
            raise ValueError(f"PIPELINE_THRESHOLD_{task.upper()} must be a number, got {raw!r}")
    return overrides


def load_provider_config(environ=None, thresholds=None) -> ProviderConfig:
    """Build the ProviderConfig from environment API keys.

    Only providers whose API key is set are included. Explicit thresholds win
    over PIPELINE_THRESHOLD_<TASK> environment overrides.
    """
    environ = os.environ if environ is None else environ

    providers = []
    for key, table in PROVIDERS.items():
        api_key = environ.get(table["env"], "").strip()
        if not api_key:
            continue
        providers.append(ProviderSpec(
            key=key,
            name=table["name"],
            base_url=table["base_url"],
            models=table["models"],
            max_tokens=table["max_tokens"],
            api=table["api"],
            api_key=api_key,
        ))

    merged = _env_thresholds(environ)
    merged.update(thresholds or {})
    return ProviderConfig(providers=tuple(providers), routing=build_routing(merged))

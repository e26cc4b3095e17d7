"""Task routing with confidence-scored fallback across providers."""

import logging
import re
import time
from dataclasses import dataclass

from config.defaults import DEFAULTS
from config.providers import ModelRef
from config.rules import JSX_EXTENSIONS
from core.errors import ConfigurationError, LowConfidenceResponse, ParseError, TransportError
from core.scanner import balance
from utils.llm import ProviderTransport, iter_file_blocks, parse_json_payload

log = logging.getLogger(__name__)

PLACEHOLDER_MARKERS = ("// ...", "// TODO", "// rest of")

_VALID_FIELD_RE = re.compile(r"""["']?valid["']?\s*:\s*(?:true|false)\b""")


@dataclass
class ResponseQuality:
    confidence: float
    has_required_fields: bool = True
    is_valid_json: bool = True
    is_valid_code: bool = True
    is_complete: bool = True


@dataclass
class CallResult:
    response: str
    provider: str
    model: str
    latency_ms: int
    used_fallback: bool


def score_response(text, task) -> ResponseQuality:
    """Heuristic confidence for a raw model response, clamped to [0, 1]."""
    quality = ResponseQuality(confidence=0.5)

    if any(marker in text for marker in PLACEHOLDER_MARKERS):
        quality.confidence -= 0.3
        quality.is_complete = False

    if task in ("intent", "planning"):
        try:
            stripped = text.strip()
            if "```json" in text or stripped.startswith("{"):
                parse_json_payload(text)
                quality.confidence += 0.2
            else:
                raise ParseError("no JSON payload")
        except ParseError:
            quality.is_valid_json = False
            quality.confidence -= 0.2

    elif task in ("coding", "repair"):
        blocks = list(iter_file_blocks(text))
        if blocks:
            quality.confidence += 0.2
            for _, path, content in blocks:
                if not balance(content, "{", jsx=path.strip().endswith(JSX_EXTENSIONS)).balanced:
                    quality.is_valid_code = False
                    quality.confidence -= 0.1
        else:
            quality.has_required_fields = False
            quality.confidence -= 0.3

    elif task == "validation":
        if _VALID_FIELD_RE.search(text):
            quality.confidence += 0.2
        else:
            quality.has_required_fields = False
            quality.confidence -= 0.2

    if len(text) < DEFAULTS["min_response_length"]:
        quality.confidence -= 0.2
        quality.is_complete = False

    quality.confidence = max(0.0, min(1.0, round(quality.confidence, 4)))
    return quality


def try_in_order(candidates, attempt, accept):
    """Call attempt(candidate) for each candidate until one is accepted.

    A TransportError moves on to the next candidate. A result that accept()
    rejects also moves on, unless it came from the last candidate, in which
    case it is returned anyway. Returns (candidate, result, index).
    """
    candidates = list(candidates)
    if not candidates:
        raise ConfigurationError("No candidates to try")

    last_error = None
    for index, candidate in enumerate(candidates):
        try:
            result = attempt(candidate)
        except TransportError as e:
            last_error = e
            log.warning("Candidate %s failed: %s", candidate, e)
            continue
        if accept(candidate, result) or index == len(candidates) - 1:
            return candidate, result, index
    raise last_error


class Router:
    """Routes a task to its primary model, falling back across configured providers."""

    def __init__(self, config, transport=None):
        self.config = config
        self.transport = transport or ProviderTransport()

    def candidates(self, task) -> list[ModelRef]:
        """Primary, designated fallback, then every other configured provider once."""
        entry = self.config.routing.get(task)
        if entry is None:
            raise ConfigurationError(f"No route for task type: {task}")

        ordered = []
        seen = set()

        def add(provider, alias=None):
            spec = self.config.get(provider)
            if spec is None or provider in seen:
                return
            seen.add(provider)
            model = spec.resolve_model(alias) if alias else spec.default_model
            ordered.append(ModelRef(provider, model))

        add(entry.provider, entry.model)
        if entry.fallback:
            add(entry.fallback.provider, entry.fallback.model)
        for spec in self.config.providers:
            add(spec.key)
        return ordered

    def call_with_fallback(self, task, messages) -> CallResult:
        candidates = self.candidates(task)
        if not candidates:
            raise ConfigurationError("No AI providers available")

        threshold = self.config.routing[task].confidence_threshold
        started = time.time()

        def attempt(ref):
            spec = self.config.get(ref.provider)
            log.info("%s -> %s (%s)", task, spec.name, ref.model)
            return self.transport.complete(spec, ref.model, messages)

        def accept(ref, text):
            quality = score_response(text, task)
            if quality.confidence >= threshold:
                return True
            log.info("%s", LowConfidenceResponse(ref.provider, ref.model, quality.confidence, threshold))
            return False

        ref, text, index = try_in_order(candidates, attempt, accept)
        return CallResult(
            response=text,
            provider=ref.provider,
            model=ref.model,
            latency_ms=int((time.time() - started) * 1000),
            used_fallback=index > 0,
        )

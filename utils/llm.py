"""Chat-completion transports and response parsing.

Every provider is reached through one contract:

    transport.complete(spec, model, messages) -> str

OpenAI-compatible providers (grok, gemini, openai) are called over httpx with
Bearer auth. Anthropic goes through the anthropic SDK, with the system message
lifted out of the message list as the Messages API expects.
"""

import json
import logging
import re

import anthropic
import httpx

from config.defaults import DEFAULTS
from core.errors import ParseError, TransportError
from core.state import FileOperation

log = logging.getLogger(__name__)


class HttpTransport:
    """POST {model, messages, max_tokens, temperature} to an OpenAI-style endpoint.

    The httpx.Client is thread-safe and holds no per-run state, so one instance
    can be shared by concurrent runs.
    """

    def __init__(self, client=None, timeout=None):
        self.timeout = timeout or DEFAULTS["request_timeout"]
        self.client = client or httpx.Client(timeout=self.timeout)

    def complete(self, spec, model, messages, temperature=None):
        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": spec.max_tokens,
            "temperature": DEFAULTS["temperature"] if temperature is None else temperature,
        }
        try:
            response = self.client.post(
                spec.base_url,
                json=payload,
                headers={"Authorization": f"Bearer {spec.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{spec.name} returned {e.response.status_code}", spec.key, model
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{spec.name} request failed: {e}", spec.key, model) from e
        except ValueError as e:
            raise TransportError(f"{spec.name} returned a non-JSON body", spec.key, model) from e

        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as e:
            raise TransportError(f"{spec.name} response has no choices", spec.key, model) from e
        if not isinstance(message, dict):
            raise TransportError(f"{spec.name} returned a malformed message", spec.key, model)
        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise TransportError(f"{spec.name} returned non-text content", spec.key, model)
        return content

    def close(self):
        self.client.close()


class AnthropicTransport:
    """Same contract, mapped onto the Anthropic Messages API."""

    def __init__(self, timeout=None):
        self.timeout = timeout or DEFAULTS["request_timeout"]

    def get_client(self, api_key):
        return anthropic.Anthropic(api_key=api_key, timeout=self.timeout)

    def complete(self, spec, model, messages, temperature=None):
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat = [m for m in messages if m["role"] != "system"]
        kwargs = {
            "model": model,
            "max_tokens": spec.max_tokens,
            "temperature": DEFAULTS["temperature"] if temperature is None else temperature,
            "messages": chat,
        }
        if system:
            kwargs["system"] = system
        try:
            response = self.get_client(spec.api_key).messages.create(**kwargs)
        except anthropic.APIError as e:
            raise TransportError(f"{spec.name} request failed: {e}", spec.key, model) from e
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )


class ProviderTransport:
    """Dispatches to the transport matching ProviderSpec.api."""

    def __init__(self, http=None, anthropic_transport=None):
        self.http = http or HttpTransport()
        self.anthropic = anthropic_transport or AnthropicTransport()

    def complete(self, spec, model, messages, temperature=None):
        if spec.api == "anthropic":
            return self.anthropic.complete(spec, model, messages, temperature)
        return self.http.complete(spec, model, messages, temperature)


_FILE_BLOCK_RE = re.compile(r"```(\w+)?:([^\n]+)\n(.*?)```", re.DOTALL)
_JSON_FENCE_RE = re.compile(r"```json\s*\n?(.*?)\n?```", re.DOTALL)


def iter_file_blocks(response):
    """Yield (lang, raw_path, content) for every ```lang:path block."""
    for match in _FILE_BLOCK_RE.finditer(response):
        yield match.group(1) or "", match.group(2), match.group(3)


def parse_files(response, operation="create"):
    """Extract FileOperations from ```lang:relative/path fenced blocks.

    A leading "/" is stripped from the path. Paths without a directory
    component and empty blocks are discarded.
    """
    files = []
    for _, raw_path, content in iter_file_blocks(response):
        path = raw_path.strip().lstrip("/")
        content = content.strip()
        if not path or not content or "/" not in path:
            log.debug("Discarding code block with path %r", raw_path)
            continue
        files.append(FileOperation(path=path, content=content, operation=operation))
    return files


def parse_json_payload(response):
    """Parse a JSON object from a fenced ```json block or the outermost {...}.

    Raises ParseError when neither yields an object.
    """
    candidates = []
    fenced = _JSON_FENCE_RE.search(response)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = response.find("{"), response.rfind("}")
    if start != -1 and end > start:
        candidates.append(response[start:end + 1])

    for text in candidates:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ParseError("No JSON object in model response")

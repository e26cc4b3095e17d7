"""Exception taxonomy for the pipeline.

Validation findings are not exceptions; they live in core.state.ValidationError.
"""


class PipelineError(RuntimeError):
    """Base class for every error the pipeline raises on purpose."""


class ConfigurationError(PipelineError):
    """No AI provider is configured, or a task has no route. Fatal for a run."""


class TransportError(PipelineError):
    """A provider call failed: network, HTTP status, timeout or malformed body."""

    def __init__(self, message, provider=None, model=None):
        super().__init__(message)
        self.provider = provider
        self.model = model


class LowConfidenceResponse(PipelineError):
    """A response parsed but scored under the task threshold. Logged, never surfaced."""

    def __init__(self, provider, model, confidence, threshold):
        super().__init__(
            f"{provider}/{model} scored {confidence:.2f} (threshold {threshold:.2f})"
        )
        self.provider = provider
        self.model = model
        self.confidence = confidence
        self.threshold = threshold


class ParseError(PipelineError, ValueError):
    """Model output does not match the grammar the stage expects."""


class PipelineCancelled(PipelineError):
    """The run was cancelled between stages."""

"""Error taxonomy shared by fetchers, normalizer, extractor and sinks.

Every error propagates to ``run_pipeline.main`` which logs it and ends the run.
An empty extraction field is not an error; see ``pipeline.validator``.
"""


class PipelineError(Exception):
    """Base class for all failures raised by the narrator pipeline."""


class NetworkError(PipelineError):
    """Transport failure or non-successful HTTP status."""

    def __init__(self, message: str, status_code: int | None = None, url: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(PipelineError, ValueError):
    """Response body is not valid JSON or lacks the expected shape."""


class ParseError(PipelineError, ValueError):
    """A value expected to be numeric could not be parsed."""


class TypeConstraintError(PipelineError, TypeError):
    """The extractor was handed something other than text."""

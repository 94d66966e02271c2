"""Ark client error types."""

from __future__ import annotations


class ArkError(RuntimeError):
    """Base ark-client error."""


class ArgumentCountError(ArkError):
    """Wrong number of positional arguments."""


class UnsupportedOutputFormatError(ArkError):
    """Output format is not one of the supported values."""


class MalformedEntryError(ArkError):
    """A delimited flag entry could not be split into key and value."""


class MalformedSelectorError(ArkError):
    """Label selector text is not valid selector syntax."""


class SubmissionError(ArkError):
    """API server could not be reached or the request could not be sent."""


class ServerRequestError(SubmissionError):
    """API server returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body

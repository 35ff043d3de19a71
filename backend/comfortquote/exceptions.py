"""Custom exception hierarchy for the ComfortQuote estimator."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single problem with one input field."""

    field: str
    message: str


class ComfortQuoteError(Exception):
    """Base exception for all ComfortQuote errors."""


class EstimateValidationError(ComfortQuoteError, ValueError):
    """Raised when required estimate input is missing or malformed."""

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors: list[FieldError] = list(errors or [])


class EstimateGenerationError(ComfortQuoteError):
    """Raised when a generated estimate fails its final invariant checks."""


class EstimateNotFoundError(ComfortQuoteError, KeyError):
    """Raised when no stored estimate exists for an ID."""

    def __init__(self, estimate_id: str) -> None:
        super().__init__(estimate_id)
        self.estimate_id = estimate_id

    def __str__(self) -> str:
        return f"Estimate '{self.estimate_id}' not found"

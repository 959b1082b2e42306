"""Errors raised along the receipt pipeline and the client registry."""

from __future__ import annotations


class BoletaError(Exception):
    """Base class for every error the service reports to its callers."""


class ValidationError(BoletaError):
    def __init__(self, missing: list[str], message: str = "") -> None:
        self.missing = list(missing)
        super().__init__(message or f"Missing required fields: {', '.join(self.missing)}")


class PhotoProcessingError(BoletaError):
    pass


class CounterError(BoletaError):
    pass


class RenderError(BoletaError):
    pass


class TransportError(BoletaError):
    pass

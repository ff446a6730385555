from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidRangeError(DomainError, ValueError):
    """Price range bounds are non-positive or non-finite."""


class PositionAnalyticsInputError(DomainError):
    """Invalid parameters for position analytics."""

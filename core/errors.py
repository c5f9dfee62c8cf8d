"""Exception types raised by the PlainPlan engine and loader."""

from __future__ import annotations

__all__ = ["ForecastConfigError", "PlanFormatError"]


class ForecastConfigError(ValueError):
    """Raised when a forecast configuration cannot drive a simulation."""


class PlanFormatError(ValueError):
    """Raised when a plan mapping has the wrong shape to be loaded."""

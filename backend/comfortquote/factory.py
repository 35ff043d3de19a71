"""Factory functions for creating pre-configured EstimateEngine instances."""

from __future__ import annotations

from comfortquote.data.repository import RegionalBandResolver
from comfortquote.engine import EstimateEngine


def create_default_engine() -> EstimateEngine:
    """Create an EstimateEngine wired up with the built-in regional band table.

    Returns:
        An EstimateEngine ready to produce estimates.

    Example::

        from comfortquote import create_default_engine

        engine = create_default_engine()
        result = engine.generate(estimate_input)
    """
    return EstimateEngine(RegionalBandResolver())

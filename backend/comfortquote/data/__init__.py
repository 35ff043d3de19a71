"""Pricing data and storage for the ComfortQuote estimator."""

from comfortquote.data.estimate_store import EstimateStore
from comfortquote.data.repository import RegionalBandResolver

__all__ = [
    "EstimateStore",
    "RegionalBandResolver",
]

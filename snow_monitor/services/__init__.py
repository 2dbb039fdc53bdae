"""Aggregation of fetched source data into display-ready views."""

from .aggregator import ResortSources, build_resort_view
from .avalanche import aggregate_danger
from .snowfall import summarize_snowfall

__all__ = ["ResortSources", "aggregate_danger", "build_resort_view", "summarize_snowfall"]

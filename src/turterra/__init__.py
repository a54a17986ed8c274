"""Turterra community service: forum ranking, voting and feeds."""

__version__ = "0.1.0"

"""HTTP API for the Turterra community service."""

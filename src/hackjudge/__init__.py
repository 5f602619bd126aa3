"""Hackathon judge: score aggregation and report rendering for team pull requests."""

__version__ = "0.1.0"

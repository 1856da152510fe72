"""NMBS departures companion: relays iRail connections to a watch over a lossy message channel."""

__version__ = "0.1.0"

"""
Market Data Dashboard

Ingests exchange pre-open and delivery snapshots, webhook alerts and
corporate calendars, and serves the derived analyses over a JSON API.
"""
__version__ = "0.1.0"

"""Startup and VC job board aggregation: extraction, validation and reconciliation."""

__version__ = "0.1.0"

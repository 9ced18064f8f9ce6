"""Citation graphs of papers loaded from JSON, built into coarsened layout graphs with link forces."""

__version__ = "0.1.0"
"""Job submission wizard for the compute marketplace dashboard."""

__version__ = "0.1.0"

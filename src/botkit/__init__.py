"""Integration SDK helpers: resilient completions, interface resolution, integration bodies."""

__version__ = "0.1.0"

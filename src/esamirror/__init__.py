"""esa-mirror — local-first mirror for esa.io posts."""

__version__ = "0.3.0"

"""Readiness Verdict - Issue classification and Go/No-Go decisions for production releases."""

__version__ = "1.0.0"

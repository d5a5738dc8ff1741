"""Command-line interface for Readiness Verdict."""

"""Static linter for Prometheus metric declarations in Go sources."""

__version__ = "0.1.0"

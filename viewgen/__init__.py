"""Generate view files from OpenAPI endpoint descriptions."""

__version__ = "0.1.0"

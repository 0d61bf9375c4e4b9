"""Observability – structured logging and metric instrument ports."""

"""Core configuration, logging and notification utilities."""

"""Core configuration, security and shared utilities."""

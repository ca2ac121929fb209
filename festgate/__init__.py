"""Festgate: festival registration, QR check-in and food eligibility API."""

__version__ = "1.0.0"

"""Behavioral risk scoring for customer order and support history."""

__version__ = "0.1.0"

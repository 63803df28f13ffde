"""Clinical record store for a gynecology practice."""

__version__ = "1.0.0"

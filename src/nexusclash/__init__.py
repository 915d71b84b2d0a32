"""Rules engine for a two-sided, tile-based tactical card battler."""

__version__ = "0.1.0"

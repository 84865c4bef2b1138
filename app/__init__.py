"""Triangle matrix engine."""

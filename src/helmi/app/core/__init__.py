"""Core services of the broker."""

"""Infrastructure adapters for external tools."""

"""Runtime support: configuration and logging."""

"""Transport layers of the broker."""

"""Catalog entities."""

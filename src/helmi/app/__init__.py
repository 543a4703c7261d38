"""Broker application layers."""

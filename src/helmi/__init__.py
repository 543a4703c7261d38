"""Helmi: an Open Service Broker backed by Helm releases."""

__version__ = "0.4.0"

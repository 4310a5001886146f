"""Plugins shipped with the exporter."""

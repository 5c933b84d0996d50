"""Outbound service integrations."""

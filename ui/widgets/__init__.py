"""Reusable DearPyGui widgets."""

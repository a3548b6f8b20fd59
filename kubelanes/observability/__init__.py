"""Logging and metrics for KubeLanes."""

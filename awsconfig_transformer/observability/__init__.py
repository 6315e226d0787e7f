"""Logging and metrics for the transformer service."""

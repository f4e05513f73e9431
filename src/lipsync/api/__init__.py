"""Shared HTTP helpers."""

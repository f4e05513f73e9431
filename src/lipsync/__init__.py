"""Lip-sync studio: media trimming and a simulated processing job queue."""

"""Sync services for notegit."""

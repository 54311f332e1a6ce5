"""Data models for notegit."""

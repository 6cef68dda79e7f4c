"""Persistence helpers shared by the API and background jobs."""

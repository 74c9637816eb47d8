"""Persistence for session history."""

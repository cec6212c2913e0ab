"""Command-line interface for eventsource."""

"""Dispatcher, tasks, streaming and refresh scheduling."""

"""Shared models, storage, config and errors."""

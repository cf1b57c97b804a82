"""Core building blocks: settings, data models, signature verification, event store."""

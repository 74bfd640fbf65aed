"""Persistence layer: models and MongoDB repositories."""

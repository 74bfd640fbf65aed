"""Bot extensions. Every module here exposing ``setup`` is loaded at startup."""

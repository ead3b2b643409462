"""Prompt-to-website generator backed by a rotating pool of provider keys."""

__version__ = "0.1.0"

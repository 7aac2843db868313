"""Configuration, logging and request security helpers."""

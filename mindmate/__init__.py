"""MindMate mood engine service."""

"""Command line interface for Chaptercutter."""

"""Textual feed viewer with the filter attached."""

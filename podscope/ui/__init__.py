"""Textual runtime and rich rendering."""

"""Application settings and runtime state."""

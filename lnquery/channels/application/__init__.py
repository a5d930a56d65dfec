"""Application layer for channel queries."""

"""Application layer: ports consumed by the scoring services."""

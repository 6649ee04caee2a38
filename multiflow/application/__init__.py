"""Application layer: orchestration over the pure calculators."""

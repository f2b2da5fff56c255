"""Skills & career advisor backend."""

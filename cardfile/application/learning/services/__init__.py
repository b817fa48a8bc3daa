"""Learning application services."""

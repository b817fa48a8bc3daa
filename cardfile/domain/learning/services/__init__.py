"""Learning context domain services."""

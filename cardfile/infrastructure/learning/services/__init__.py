"""Infrastructure services for the learning context."""

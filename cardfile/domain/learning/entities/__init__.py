"""Learning context entities."""

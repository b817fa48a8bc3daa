"""Learning use cases."""

"""Ports used by the learning application layer."""

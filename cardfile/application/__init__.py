"""
Application layer.

The application layer orchestrates domain objects and defines the boundaries
of the system. It contains the operations a presentation layer (web pages,
command line) calls to study card sets.

This layer contains:
- Services: The card library and study sessions
- Use Cases: One-shot operations such as cleaning a progress file
- Protocols: Interfaces for the file-based infrastructure
"""

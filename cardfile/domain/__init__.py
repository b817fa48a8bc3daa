"""
Domain layer.

The domain layer contains the core logic of cardfile.
It has no dependencies on the filesystem or any presentation layer.

This layer contains:
- Entities: Cards and card sets
- Value Objects: Identifiers, fingerprints, remap rules, statistics
- Aggregate Roots: Card sets, which own their cards
- Domain Services: The card file parser and the scheduler
"""

"""
Learning bounded context - Domain layer.

This context handles flashcard study from plain-text card files:
- Parsing card definition files into cards
- Spaced-repetition scheduling and card selection
- Review progress tracking per card

Aggregates:
- CardSet: One definition file, its progress file and its cards
"""

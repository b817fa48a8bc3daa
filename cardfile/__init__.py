"""
cardfile - plain-text flashcards with spaced-repetition progress tracking.

Card definitions live in ``.cd`` files; per-card review progress lives
next to them (or under a remapped root) in ``.cdd`` files.
"""

__version__ = "0.1.0"

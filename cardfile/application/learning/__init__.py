"""
Learning bounded context - Application layer.

Contains:
- CardLibrary: Discover, load, review and save card sets
- StudySession: Draw cards from one card set and record answers
- CleanProgressUseCase: Prune progress for cards no longer defined
"""

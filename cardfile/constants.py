"""
Application constants.

File naming conventions shared by discovery, loading and saving.
"""

# Card definition files end with this suffix.
DEFINITION_SUFFIX = ".cd"

# Progress files are named after their definition file plus this suffix ("x.cd" -> "x.cdd").
PROGRESS_SUFFIX = "d"

# Remap rules are read from this file in the cards root.
REMAP_RULES_FILENAME = "cardFiles"

# Field separator in definition and progress files.
FIELD_DELIMITER = " | "

# Largest number of candidates a study session draws from.
DRAW_LIMIT = 10

"""Configuration for the pediatric reference module.

Values come from environment variables with defaults. Scripts may override
attributes on the shared ``config`` object after parsing CLI flags.
"""

import os


class Config:
    """Runtime settings read from the environment."""

    def __init__(self):
        self.DB_PATH = os.environ.get(
            "PEDS_REFERENCE_DB_PATH", "~/.aegis/pediatric_reference.db"
        )

        # first_match | narrowest_range
        self.DOSAGE_RULE_SELECTION = os.environ.get(
            "DOSAGE_RULE_SELECTION", "first_match"
        )

        self.SEARCH_LIMIT = int(os.environ.get("REFERENCE_SEARCH_LIMIT", "10"))
        self.EXCERPT_LENGTH = int(os.environ.get("REFERENCE_EXCERPT_LENGTH", "200"))

        self.TEXTBOOK_TITLE = "Nelson Textbook of Pediatrics"
        self.DOSING_CITATIONS = [
            "Nelson Textbook of Pediatrics - Pediatric Drug Dosing Guidelines",
        ]


config = Config()

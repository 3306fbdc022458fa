"""Domain services for the identity and credential lifecycle."""

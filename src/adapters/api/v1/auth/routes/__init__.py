"""One module per credential endpoint; each exposes a ``router``."""

"""One module per profile endpoint; each exposes a ``router``."""

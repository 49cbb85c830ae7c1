"""newslog - RSS/Atom headline aggregator."""

__version__ = "1.0.0"

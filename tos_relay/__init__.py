"""Terms-of-service signature relay."""

__version__ = "1.0.0"

from .organization import Department

__all__ = ["Department"]

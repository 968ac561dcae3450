from .auth import bp as auth_bp
from .selection import bp as selection_bp
from .closings import bp as closings_bp

__all__ = ["auth_bp", "selection_bp", "closings_bp"]

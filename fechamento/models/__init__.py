from .selection import Selection
from .monthly_closing import MonthlyClosing
from .user import User
from .password_reset_code import PasswordResetCode

__all__ = ["Selection", "MonthlyClosing", "User", "PasswordResetCode"]

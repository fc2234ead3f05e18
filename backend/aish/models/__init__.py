from aish.models.case import Case
from aish.models.user import User

__all__ = ["Case", "User"]

from . import auth, conditions, initialize, isu, trend

__all__ = [
    "auth",
    "conditions",
    "initialize",
    "isu",
    "trend",
]

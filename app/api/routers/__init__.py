from . import cart
from . import health
from . import notifications

__all__ = [
    "cart",
    "health",
    "notifications",
]

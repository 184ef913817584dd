"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory -> Redis -> PostgreSQL)
- Actions written as plain classes or ``ActionDefinition`` instances
- Unit testing with small fakes
"""

from .action import Action, HandlerCallback, RuntimeContext, State
from .cache_store import CacheStore

__all__ = [
    "Action",
    "CacheStore",
    "HandlerCallback",
    "RuntimeContext",
    "State",
]

import json

from action_runtime.entities import JSONValue
from action_runtime.errors import InvalidCacheKeyError


def check_scope(owner_id: str, key: str) -> None:
    if not owner_id:
        raise InvalidCacheKeyError("owner_id is required")
    if not key:
        raise InvalidCacheKeyError("key is required")


def dump_value(value: JSONValue) -> str:
    """Serialize a payload; the store never looks inside it."""
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise InvalidCacheKeyError(f"value is not JSON serializable: {e}") from e

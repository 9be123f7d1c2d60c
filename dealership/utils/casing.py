"""
Key casing helpers.

The API speaks camelCase (what the storefront and admin console send);
records are stored snake_case.
"""
from typing import Any, AbstractSet, Dict

from pydantic.alias_generators import to_camel, to_snake

__all__ = ["to_camel", "to_snake", "snake_keys", "camel_keys", "patch_changes"]


def snake_keys(value: Any) -> Any:
    """Recursively rename dict keys camelCase -> snake_case."""
    if isinstance(value, dict):
        return {to_snake(k): snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [snake_keys(v) for v in value]
    return value


def camel_keys(value: Any) -> Any:
    """Recursively rename dict keys snake_case -> camelCase."""
    if isinstance(value, dict):
        return {to_camel(k): camel_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [camel_keys(v) for v in value]
    return value


def patch_changes(sent: Dict[str, Any], nullable: AbstractSet[str] = frozenset()) -> Dict[str, Any]:
    """
    Snake-cased changes for a partial update.

    An explicit null clears the fields named in `nullable` (snake_case);
    for every other field it counts as not sent.
    """
    return snake_keys({
        k: v for k, v in sent.items()
        if v is not None or to_snake(k) in nullable
    })

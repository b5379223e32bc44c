from dataclasses import dataclass, asdict
from typing import Any, Dict, Tuple

from .errors import DecodeError


def _is_int(value: Any) -> bool:
    # JSON true/false decode to bool, which is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Tag:
    """One tag from the /tags endpoint"""

    name: str
    count: int = 0
    has_synonyms: bool = False
    is_moderator_only: bool = False
    is_required: bool = False

    @classmethod
    def of(cls, item: Dict[str, Any]) -> "Tag":
        """Create instance from a raw API item"""
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise DecodeError(f"tag item without a name: {item!r}")

        count = item.get("count", 0)
        if not _is_int(count):
            raise DecodeError(f"invalid count in tag item {item!r}")

        flags = {}
        for flag in ("has_synonyms", "is_moderator_only", "is_required"):
            value = item.get(flag, False)
            if not isinstance(value, bool):
                raise DecodeError(f"invalid {flag} in tag item {item!r}")
            flags[flag] = value

        return cls(name=item["name"], count=count, **flags)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TagPage:
    """Decoded response envelope for one page"""

    items: Tuple[Tag, ...]
    has_more: bool
    quota_max: int = 0
    quota_remaining: int = 0

    @classmethod
    def of(cls, payload: Any) -> "TagPage":
        """Create instance from a decoded JSON body"""
        if not isinstance(payload, dict):
            raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")
        if not isinstance(payload.get("items"), list):
            raise DecodeError("response has no 'items' array")
        if not isinstance(payload.get("has_more"), bool):
            raise DecodeError("response has no boolean 'has_more'")

        items = tuple(Tag.of(item) for item in payload["items"])
        quota_max = payload.get("quota_max", 0)
        quota_remaining = payload.get("quota_remaining", 0)
        if not (_is_int(quota_max) and _is_int(quota_remaining)):
            raise DecodeError(
                f"invalid quota counters: {quota_max!r}, {quota_remaining!r}"
            )

        return cls(
            items=items,
            has_more=payload["has_more"],
            quota_max=quota_max,
            quota_remaining=quota_remaining,
        )

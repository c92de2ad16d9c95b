"""
Cache option records and the resolver that merges call-site shorthands
with a handle's stored defaults.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from numbers import Real
from typing import Any, Union

logger = logging.getLogger(__name__)

# Original camelCase names accepted in option mappings
_ALIASES = {
    "fromCache": "from_cache",
    "resetTimer": "reset_timer",
}


@dataclass
class CacheOptions:
    """Options controlling how a single operation uses the handle cache.

    Attributes:
        cache: Store the operation result in the handle cache.
        expires: Milliseconds until the cache is cleared; 0 never expires.
        from_cache: Let read() answer from a populated cache without I/O.
        reset_timer: Restart an armed expiration timer instead of leaving
            it counting down.
    """

    cache: bool = False
    expires: int = 0
    from_cache: bool = False
    reset_timer: bool = True

    def __post_init__(self):
        if self.expires < 0:
            self.expires = 0

    def copy(self) -> CacheOptions:
        return replace(self)

    def merged(self, overlay: Mapping[str, Any] | CacheOptions) -> CacheOptions:
        """Return a new record with the keys of overlay applied on top."""
        if isinstance(overlay, CacheOptions):
            return replace(overlay)

        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overlay.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                logger.warning("Ignoring unknown cache option: %s", key)
                continue
            if name == "expires":
                value = _as_expires(value)
                if value is None:
                    logger.warning("Ignoring invalid expires option: %r", overlay[key])
                    continue
            changes[name] = value
        return replace(self, **changes)


def _as_expires(value: Any) -> int | None:
    """Coerce an expires value to whole milliseconds, or None if it is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


CacheShorthand = Union[bool, int, float, Mapping[str, Any], CacheOptions, None]


def resolve_options(
    explicit: CacheShorthand,
    defaults: CacheOptions,
    options: Mapping[str, Any] | CacheOptions | None = None,
) -> CacheOptions:
    """
    Resolve a call-site option value into a concrete CacheOptions record.

    Args:
        explicit: The value passed to the operation. A bool sets ``cache``,
            a number sets ``cache=True`` and ``expires``, a mapping or
            CacheOptions is overlaid key by key. None (or any other shape)
            means no explicit options.
        defaults: The handle's default record.
        options: An externally assigned record that takes precedence over
            defaults.

    Returns:
        A fresh CacheOptions; neither defaults nor options are mutated.
    """
    base = defaults.copy()
    if options is not None:
        base = base.merged(options)

    # bool is checked before numbers since bool subclasses int
    if isinstance(explicit, bool):
        return replace(base, cache=explicit)
    if isinstance(explicit, Real):
        expires = _as_expires(explicit)
        if expires is None:
            return base
        return replace(base, cache=True, expires=expires)
    if isinstance(explicit, (Mapping, CacheOptions)):
        return base.merged(explicit)
    return base

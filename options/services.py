import json
from typing import Any, List, Optional, Tuple

from django.core.cache import cache
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from options.models import Option

# Cache settings
CACHE_TIMEOUT = 300  # 5 minutes
CACHE_KEY_PREFIX = "option:"

MAX_LIST_SIZE = 1000


def _get_cache_key(name: str) -> str:
    """Generate cache key for a given option name."""
    return f"{CACHE_KEY_PREFIX}{name}"


def encode_value(value: Any) -> str:
    return json.dumps(value, cls=DjangoJSONEncoder)


def decode_value(raw: str) -> Any:
    return json.loads(raw)


def read_option(name: str) -> Option:
    """
    Read an option row, using the cache for hot names.

    Raises:
        Option.DoesNotExist: If no option with that name is stored
    """
    cache_key = _get_cache_key(name)

    cached_entry = cache.get(cache_key)
    if cached_entry is not None:
        return cached_entry

    entry = Option.objects.only(
        "name", "value", "autoload", "version", "created_at", "updated_at"
    ).get(name=name)

    cache.set(cache_key, entry, CACHE_TIMEOUT)

    return entry


def get_option(name: str, default: Any = None) -> Any:
    """
    Return the decoded value of an option, or ``default`` when it is not stored.

    A stored JSON ``null`` is returned as ``None``; callers that need to tell
    it apart from a missing option should pass a sentinel ``default``.
    """
    try:
        entry = read_option(name)
    except Option.DoesNotExist:
        return default
    return decode_value(entry.value)


def update_option(name: str, value: Any, autoload: Optional[bool] = None) -> Tuple[Option, bool]:
    """
    Create or update an option.

    The value is JSON encoded before it is stored. The version is incremented
    with an F() expression so concurrent writers cannot lose an increment.

    Args:
        name: The option name
        value: Any JSON serializable value
        autoload: Autoload flag to store; None keeps the current flag (or the
            model default for new options)

    Returns:
        Tuple of (option, created)
    """
    raw = encode_value(value)
    changes = {"value": raw, "version": F("version") + 1, "updated_at": timezone.now()}
    if autoload is not None:
        changes["autoload"] = autoload

    with transaction.atomic():
        updated = Option.objects.filter(name=name).update(**changes)

        if updated:
            entry = Option.objects.get(name=name)
            created = False
        else:
            fields = {"name": name, "value": raw, "version": 1}
            if autoload is not None:
                fields["autoload"] = autoload
            entry = Option.objects.create(**fields)
            created = True

        cache.delete(_get_cache_key(name))

        return entry, created


def delete_option(name: str) -> bool:
    """
    Delete an option.

    Returns:
        True if deleted, False if the option didn't exist
    """
    deleted, _ = Option.objects.filter(name=name).delete()

    if deleted:
        cache.delete(_get_cache_key(name))

    return bool(deleted)


def list_options(autoload: Optional[bool] = None, limit: Optional[int] = None) -> List[Option]:
    """Return options ordered by name, optionally filtered by autoload flag."""
    if limit is None:
        limit = MAX_LIST_SIZE
    else:
        limit = min(limit, MAX_LIST_SIZE)

    queryset = Option.objects.only(
        "name", "value", "autoload", "version", "created_at", "updated_at"
    ).order_by("name")
    if autoload is not None:
        queryset = queryset.filter(autoload=autoload)

    return list(queryset[:limit])

"""Resolve ``--cycle`` values (current, next, previous, number) to cycles."""

import json
from datetime import datetime

import structlog
from pydantic import ValidationError

from linear_cli.api.client import LinearClient
from linear_cli.api.models import Cycle
from linear_cli.exceptions import LinearCliError, NotFoundError
from linear_cli.utils.caching import FileCache

log = structlog.get_logger(__name__)

CYCLE_CACHE_KEY = "cycles/list"
CYCLE_CACHE_TTL = 24 * 60 * 60

NAMED_CYCLES = ("current", "next", "previous")


def cycle_boundary_crossed(cycles: list[Cycle], now: datetime) -> bool:
    """Report whether cached cycle flags are stale.

    The isActive/isNext/isPrevious flags are snapshots, so cached data is
    stale once the active cycle has ended, or when it has no active cycle.
    """
    for cycle in cycles:
        if not cycle.is_active:
            continue
        if cycle.ends_at is None:
            return True
        return now > cycle.ends_at
    return True


def _load_cached(cache: FileCache) -> list[Cycle] | None:
    data = cache.get_with_ttl(CYCLE_CACHE_KEY, CYCLE_CACHE_TTL)
    if data is None:
        return None
    try:
        return [Cycle.model_validate(c) for c in json.loads(data)]
    except (ValueError, ValidationError):
        log.debug("cycle_cache_corrupt")
        return None


def list_cycles_cached(client: LinearClient, cache: FileCache | None, now: datetime) -> list[Cycle]:
    """Return cycles, serving from cache unless expired or a boundary passed."""
    if cache is not None:
        cycles = _load_cached(cache)
        if cycles is not None and not cycle_boundary_crossed(cycles, now):
            log.debug("cycle_cache_hit")
            return cycles

    cycles = client.list_cycles(50)

    if cache is not None:
        payload = json.dumps([c.model_dump(mode="json", by_alias=True) for c in cycles])
        try:
            cache.set(CYCLE_CACHE_KEY, payload)
        except OSError as e:
            log.debug("cycle_cache_write_failed", error=str(e))

    return cycles


def parse_cycle_value(value: str) -> int | str:
    """Validate a ``--cycle`` value.

    Returns:
        The cycle number, or the lowercased name

    Raises:
        LinearCliError: If the value is not a number or a known name
    """
    lowered = value.strip().lower()
    try:
        number = float(lowered)
    except ValueError:
        if lowered not in NAMED_CYCLES:
            raise LinearCliError(
                f'invalid --cycle value "{value}": must be current, next, previous, or a number'
            ) from None
        return lowered
    if not number.is_integer():
        raise LinearCliError(f'invalid --cycle value "{value}": cycle numbers are whole numbers')
    return int(number)


def resolve_cycle(client: LinearClient, cache: FileCache | None, now: datetime, value: str) -> Cycle:
    """Find the cycle a ``--cycle`` value refers to.

    Raises:
        LinearCliError: If the value is malformed
        NotFoundError: If no cycle matches
    """
    wanted = parse_cycle_value(value)
    cycles = list_cycles_cached(client, cache, now)

    for cycle in cycles:
        if isinstance(wanted, int):
            matched = cycle.number == wanted
        elif wanted == "current":
            matched = cycle.is_active
        elif wanted == "next":
            matched = cycle.is_next
        else:
            matched = cycle.is_previous
        if matched:
            return cycle

    raise NotFoundError(f"no {value} cycle found")

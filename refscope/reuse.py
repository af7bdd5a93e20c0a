"""
In-flight deduplication for async lookups.

Several callers often ask the same question at once ("which ref am I
on?" from every file view that opens). ``reusable`` makes them share one
pending call instead of each starting its own GitHub request:

    @reusable
    async def get_branches(force_update=False):
        ...

    # Both await the same underlying call
    a, b = await asyncio.gather(get_branches(), get_branches())

Calls are equivalent when their arguments are equal by value after
defaults are applied, so ``get_branches()`` and ``get_branches(False)``
share a call. Once the shared call settles, successfully or not, the next
call starts a fresh one.
"""

import asyncio
import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


def freeze(value: Any) -> Hashable:
    """
    Turn a value into a hashable structure that compares by value.

    Lists and tuples become tuples, dicts become sorted item tuples and
    sets become frozensets. Anything else that is hashable is kept as-is
    (tagged with its type so ``True`` and ``1`` stay distinct), and
    unhashable leftovers fall back to their repr.
    """
    if isinstance(value, dict):
        items = ((freeze(k), freeze(v)) for k, v in value.items())
        return ('dict', tuple(sorted(items, key=repr)))
    if isinstance(value, (list, tuple)):
        return ('seq', tuple(freeze(item) for item in value))
    if isinstance(value, (set, frozenset)):
        return ('set', frozenset(freeze(item) for item in value))
    try:
        hash(value)
    except TypeError:
        return ('repr', repr(value))
    return (type(value).__qualname__, value)


class InflightMap:
    """Pending futures keyed by call signature."""

    def __init__(self):
        self._pending: Dict[Hashable, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def pending(self, key: Hashable) -> bool:
        """Whether a call for ``key`` is currently in flight."""
        future = self._pending.get(key)
        return future is not None and not future.done()

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the in-flight call for ``key``, starting one with ``factory`` if none.

        The shared future is shielded so one caller being cancelled does
        not cancel the work the other callers are waiting on.
        """
        future = self._pending.get(key)
        if future is not None and not future.done():
            logger.debug(f"Joining in-flight call {key!r}")
            return await asyncio.shield(future)

        future = asyncio.ensure_future(factory())
        self._pending[key] = future
        future.add_done_callback(functools.partial(self._settled, key))
        return await asyncio.shield(future)

    def _settled(self, key: Hashable, future: asyncio.Future) -> None:
        if self._pending.get(key) is future:
            del self._pending[key]


def _signature_key(signature: inspect.Signature, args, kwargs, skip_self: bool) -> Tuple[Hashable, Any]:
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    arguments = dict(bound.arguments)
    instance = None
    if skip_self:
        instance = arguments.pop('self')
    return freeze(arguments), instance


def reusable(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Share one in-flight call among concurrent callers with equal arguments.

    Works on plain coroutine functions and on methods. For methods each
    instance keeps its own in-flight map, so two sessions never share a
    pending call.
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"reusable() needs a coroutine function, got {func!r}")

    signature = inspect.signature(func)
    is_method = next(iter(signature.parameters), None) == 'self'
    shared = InflightMap()

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        key, instance = _signature_key(signature, args, kwargs, is_method)
        inflight = shared if instance is None else inflight_for(instance, func)
        return await inflight.run(key, lambda: func(*args, **kwargs))

    return wrapper


def inflight_for(instance: Any, method: Callable) -> InflightMap:
    """Return the in-flight map a ``reusable`` method keeps on ``instance``."""
    attr_name = f'_inflight_{method.__name__}'
    inflight = instance.__dict__.get(attr_name)
    if inflight is None:
        inflight = instance.__dict__[attr_name] = InflightMap()
    return inflight

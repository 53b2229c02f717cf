"""Associative merge shared by value series and area names."""

from collections.abc import Callable, Mapping, MutableMapping
from typing import TypeVar

K = TypeVar("K")
V = TypeVar("V")


def prefer_incoming(existing: V, incoming: V) -> V:
    """Collision policy where the incoming value replaces the existing one."""
    return incoming


def merge_into(
    target: MutableMapping[K, V],
    incoming: Mapping[K, V],
    resolve: Callable[[V, V], V] = prefer_incoming,
) -> MutableMapping[K, V]:
    """Merge ``incoming`` into ``target`` in place.

    Keys only in ``target`` are kept, keys only in ``incoming`` are added and
    colliding keys are replaced by ``resolve(existing, incoming)``.

    Args:
        target: Mapping that receives the data.
        incoming: Newer data to merge in.
        resolve: Collision policy, called as ``resolve(existing, incoming)``.

    Returns:
        The updated ``target``.
    """
    for key, value in incoming.items():
        if key in target:
            target[key] = resolve(target[key], value)
        else:
            target[key] = value
    return target

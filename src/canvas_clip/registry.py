"""
Registry pattern utility for creating type registries.

This module provides the ``new_registry`` function which creates a registry
dictionary and a decorator for registering handlers. The transform handlers
are registered against their order class with it.

Usage example::

    from canvas_clip.registry import new_registry

    HANDLERS, register = new_registry(attribute='order_class')

    @register(ClipOrder)
    def clip(surface, order, config):
        ...

    handler = HANDLERS[type(order)]
"""

from typing import Any, Callable, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry_dict, register_decorator)

    Registering the same key twice is an error, so a registry never silently
    replaces a handler.
    """
    registry: dict = {}

    def register(key: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            if key in registry:
                raise KeyError("Duplicate registration for %r" % (key,))
            registry[key] = func
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return registry, register

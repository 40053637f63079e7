"""
Registry pattern utility.

``new_registry`` creates a registry dictionary and a decorator for
registering handlers. texfill uses it to look up texture decoders by URL
scheme::

    DECODERS, register = new_registry(attribute='schemes')

    @register('http', 'https')
    def decode_remote(url):
        ...

    decoder = DECODERS['https']
"""

from typing import Any, Callable, Optional, Tuple, TypeVar

T = TypeVar("T")


def new_registry(attribute: Optional[str] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The tuple of keys is stored as this attribute.
    :return: Tuple of (registry_dict, register_decorator)
    """
    registry: dict = {}

    def register(*keys: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        if not keys:
            raise ValueError("At least one registry key is required")

        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            for key in keys:
                if key in registry:
                    raise ValueError("Duplicate registry key: %r" % (key,))
                registry[key] = func
            if attribute:
                setattr(func, attribute, keys)
            return func

        return decorator

    return registry, register

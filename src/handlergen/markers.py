"""Runtime side of the `handler` annotation. The generator reads it from source; at runtime it is inert."""

from typing import Any, Callable, Optional, TypeVar, overload

T = TypeVar("T")


@overload
def handler(target: T) -> T: ...


@overload
def handler(
    target: None = None,
    *,
    returns: Optional[str] = None,
    trait_name: Optional[str] = None,
    method: Optional[str] = None,
) -> Callable[[T], T]: ...


def handler(target: Any = None, **options: Optional[str]) -> Any:
    """
    Mark a class as a tagged union to expand with `handlergen generate`.

    Usable bare (`@handler`) or with options (`@handler(returns="int")`).
    The options are recorded on the class as `__handler_options__`.
    """

    def mark(cls: T) -> T:
        setattr(cls, "__handler_options__", dict(options))
        return cls

    if target is None:
        return mark
    return mark(target)

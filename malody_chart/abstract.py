"""Guard that keeps base types from being constructed directly."""

from __future__ import annotations

from typing import Any, ClassVar

from malody_chart.errors import AbstractInstantiation


class Abstract:
    """Mixin refusing construction of classes that declare themselves abstract.

    A class is abstract only when ``_abstract = True`` appears in its own
    body; subclasses do not inherit the flag, so they are concrete as soon
    as they extend the base.

    Examples
    --------
    >>> class Base(Abstract):
    ...     _abstract = True
    >>> class Concrete(Base):
    ...     pass
    >>> isinstance(Concrete(), Base)
    True
    """

    _abstract: ClassVar[bool] = False

    def __new__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls.__dict__.get("_abstract", False):
            raise AbstractInstantiation(cls)
        return super().__new__(cls)

# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Variant expansion for iterate directives.

Purpose
=======
Turns a directive list into the list of variants the pipeline runs. A
variant is an iterate-free directive sequence. Without an iterate directive
there is exactly one variant, equal to the input list.

Expansion Schema::

    [set port=443, append path=x, iterate hosts=a.com b.com]
                        ↓ expand_variants
    Variant([set port=443, append path=x, set host=a.com])
    Variant([set port=443, append path=x, set host=b.com])

Sets for the iterated component are replaced by the iterated value; every
other directive is copied into each variant. Variant order follows the
iterate values and fixes the output order.

Definition::

    class Variant:
        __slots__ = ("directives",)
        sets -> tuple[SetComponent, ...]
        path_appends -> tuple[AppendPath, ...]
        query_appends -> tuple[AppendQuery, ...]
        trims -> tuple[TrimQuery, ...]

    def expand_variants(directives: Sequence[Directive]) -> list[Variant]
"""

from __future__ import annotations

from typing import Iterable, Iterator, Sequence, TypeVar

from .directives import (
    AppendPath,
    AppendQuery,
    Directive,
    IterateComponent,
    SetComponent,
    TrimQuery,
)
from .exceptions import DirectiveFault, IterateError, SetError

__all__ = ["Variant", "expand_variants"]

D = TypeVar("D", bound=Directive)


class Variant:
    """One fully resolved directive sequence, owned by nobody else."""

    __slots__ = ("directives",)

    def __init__(self, directives: Iterable[Directive]) -> None:
        self.directives: tuple[Directive, ...] = tuple(directives)
        if any(isinstance(d, IterateComponent) for d in self.directives):
            raise ValueError("a variant cannot hold an iterate directive")

    def _of_type(self, kind: type[D]) -> tuple[D, ...]:
        return tuple(d for d in self.directives if isinstance(d, kind))

    @property
    def sets(self) -> tuple[SetComponent, ...]:
        return self._of_type(SetComponent)

    @property
    def path_appends(self) -> tuple[AppendPath, ...]:
        return self._of_type(AppendPath)

    @property
    def query_appends(self) -> tuple[AppendQuery, ...]:
        return self._of_type(AppendQuery)

    @property
    def trims(self) -> tuple[TrimQuery, ...]:
        return self._of_type(TrimQuery)

    def __iter__(self) -> Iterator[Directive]:
        return iter(self.directives)

    def __len__(self) -> int:
        return len(self.directives)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Variant):
            return self.directives == other.directives
        return False

    def __repr__(self) -> str:
        return f"Variant({list(self.directives)!r})"


def _check_unique_sets(directives: Iterable[Directive], skip: str | None) -> None:
    seen: set[str] = set()
    for directive in directives:
        if not isinstance(directive, SetComponent) or directive.name == skip:
            continue
        if directive.name in seen:
            raise SetError(
                f"A component can only be set once per URL ({directive.name})",
                DirectiveFault.DUPLICATE_COMPONENT,
            )
        seen.add(directive.name)


def expand_variants(directives: Sequence[Directive]) -> list[Variant]:
    """
    Expand a directive list into variants.

    Args:
        directives: Parsed directives, holding at most one IterateComponent.

    Returns:
        One variant per iterate value, or a single variant without iterate.

    Raises:
        IterateError: More than one iterate directive.
        SetError: A component set twice (sets of the iterated component excluded).
    """
    iterates = [d for d in directives if isinstance(d, IterateComponent)]
    if len(iterates) > 1:
        raise IterateError("only one --iterate is supported", DirectiveFault.DUPLICATE_COMPONENT)
    if not iterates:
        _check_unique_sets(directives, skip=None)
        return [Variant(directives)]

    iterate = iterates[0]
    _check_unique_sets(directives, skip=iterate.component_name)
    base = [
        d
        for d in directives
        if not isinstance(d, IterateComponent)
        and not (isinstance(d, SetComponent) and d.name == iterate.component_name)
    ]
    return [
        Variant([*base, SetComponent(iterate.component_name, value)])
        for value in iterate.values
    ]

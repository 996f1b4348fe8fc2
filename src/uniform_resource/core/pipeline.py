"""Ordered composition of asynchronous transformers.

`transformation_pipe(a, b, c)` runs ``a`` then ``b`` then ``c`` with the
same context, each step receiving the previous step's output. The pipe does
not retry or swallow exceptions. An `InvalidResource` is terminal and halts
the remaining steps.
"""

from __future__ import annotations

from typing import Tuple, TypeVar

from uniform_resource.core.interfaces import Transformer
from uniform_resource.core.resource import InvalidResource

C = TypeVar("C")
T = TypeVar("T")


class TransformationPipe(Transformer[C, T]):
    def __init__(self, *steps: Transformer[C, T]) -> None:
        flattened = []
        for step in steps:
            # nested pipes are spliced in so composition stays associative
            if isinstance(step, TransformationPipe):
                flattened.extend(step.steps)
            else:
                flattened.append(step)
        self.steps: Tuple[Transformer[C, T], ...] = tuple(flattened)

    def then(self, *steps: Transformer[C, T]) -> "TransformationPipe[C, T]":
        return TransformationPipe(*self.steps, *steps)

    async def transform(self, ctx: C, item: T) -> T:
        # zero steps is the identity, one step a plain delegation
        result = item
        for step in self.steps:
            if isinstance(result, InvalidResource):
                break
            result = await step.transform(ctx, result)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransformationPipe):
            return NotImplemented
        return self.steps == other.steps

    def __hash__(self) -> int:
        return hash(self.steps)

    def __repr__(self) -> str:
        names = ", ".join(type(s).__name__ for s in self.steps)
        return f"TransformationPipe({names})"


def transformation_pipe(*steps: Transformer[C, T]) -> TransformationPipe[C, T]:
    return TransformationPipe(*steps)

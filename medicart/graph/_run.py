"""
Graph runner: build a nodnod agent once, run it per request.

Inputs are injected under an explicit type so fakes and subclasses resolve
to the dependency the node declared.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Mapping
from dataclasses import dataclass
from typing import Any, cast

from nodnod import EventLoopAgent, Node, Scope, Value

type Inputs = Mapping[type[Any], object]


@dataclass(slots=True, frozen=True)
class Graph[T]:
    """
    Compiled graph for a target node.

    Example:
        context = graph(CheckoutContextNode)
        node = await context({CartStore: store, AddressGate: gate})
    """

    target: type[T]
    agent: EventLoopAgent

    async def __call__(self, inputs: Inputs) -> T:
        async with Scope(detail=f"graph:{self.target.__name__}") as scope:
            for typ, value in inputs.items():
                scope.push(Value(typ, value))

            run = cast(
                Callable[[Scope, dict[type[Any], Scope]], Coroutine[Any, Any, None]],
                getattr(self.agent, "run"),
            )
            await run(scope, {})

            produced = scope.get(self.target)
            if produced is None:
                raise LookupError(f"{self.target.__name__} was not produced")
            return cast(T, produced.value)


def graph[T](target: type[T]) -> Graph[T]:
    """Compile the graph rooted at ``target``; dependencies are discovered."""
    nodes: set[type[Node[Any, Any]]] = {cast(type[Node[Any, Any]], target)}
    return Graph(target=target, agent=EventLoopAgent.build(nodes))


async def compose[T](target: type[T], inputs: Inputs) -> T:
    """One-shot: compile and run."""
    return await graph(target)(inputs)


__all__ = ("Inputs", "Graph", "graph", "compose")

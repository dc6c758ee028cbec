"""
Graph: dependency-resolved computations on nodnod.

    from medicart import graph as G

    @G.node
    class Valuation:
        @classmethod
        def __compose__(cls, cart: CartSnapshot) -> "Valuation":
            return cls(valuate(cart.cart.lines))

    node = await G.compose(Valuation, {CartStore: store})
"""

from nodnod import scalar_node as node

from medicart.graph._run import Inputs, Graph, graph, compose

__all__ = ("node", "Inputs", "Graph", "graph", "compose")

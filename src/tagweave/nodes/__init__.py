"""Template tree nodes.

A template is an ordered sequence of these nodes, a closed set:

- ``Literal``: fixed text from the template source
- ``Escaped``: an interpolated value converted to safe text
- ``Trusted``: a nested template embedded without re-escaping
- ``Deferred``: a callable invoked with the request context
- ``DeferredGroup``: a list of templates interpolated as one value

"""

from tagweave.nodes.base import Node
from tagweave.nodes.deferred import Deferred, DeferredGroup
from tagweave.nodes.output import Escaped, Literal, Trusted

__all__ = [
    "Deferred",
    "DeferredGroup",
    "Escaped",
    "Literal",
    "Node",
    "Trusted",
]

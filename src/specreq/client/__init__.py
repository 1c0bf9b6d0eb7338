"""Request building -- resolve spec servers into request descriptors.

Exports the pure functions that take a :class:`~specreq.models.Server`
(or a whole :class:`~specreq.models.Specification`) and produce
:class:`~specreq.models.RequestDescriptor` values, plus
:func:`build_request` for turning a descriptor into an unsent
:class:`httpx.Request`.
"""

from specreq.client.request_builder import build_request, from_server, from_specification

__all__ = ["from_server", "from_specification", "build_request"]

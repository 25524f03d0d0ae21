"""
rmsim: Resource Management Simulator for delay-tolerant networks

Models per-node resource contention in a DTN. Every node runs a bounded,
partitioned message buffer and a traffic protocol that exchanges requests,
responses and unidirectional messages between servers, clients and
"resource hogs".

Core concepts:
- Roles are assigned once: Server, ResourceHog, PlainClient
- Each node buffers messages in partitions keyed by a counterpart address
- When the buffer is full, the fullest partition loses its oldest message
- Hogs send on a tighter interval and crowd out everyone else's partitions

The network itself (mobility, contacts, transport) lives outside this
package and is reached through the protocols in rmsim.core.environment.
"""

__version__ = "0.1.0"

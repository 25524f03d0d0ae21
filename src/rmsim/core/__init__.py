"""
Core primitives.

This layer knows nothing about traffic generation or the request/response
protocol. It only knows:
- Scenario configuration and its validation
- Messages and their types
- Roles (servers, resource hogs, plain clients)
- The partitioned buffer and its eviction rule
- The interfaces to the host environment (clock, transport, events)
"""

from rmsim.core.config import ResourceManagementConfig, ConfigError, from_settings
from rmsim.core.messages import APP_ID, Message, MessageType, create_message, make_message_id
from rmsim.core.events import AppEvent, EventBus, EventListener
from rmsim.core.environment import Clock, Transport
from rmsim.core.roles import Role, RoleAssignment, assign_roles
from rmsim.core.buffer import PartitionedBuffer

__all__ = [
    "ResourceManagementConfig",
    "ConfigError",
    "from_settings",
    "APP_ID",
    "Message",
    "MessageType",
    "create_message",
    "make_message_id",
    "AppEvent",
    "EventBus",
    "EventListener",
    "Clock",
    "Transport",
    "Role",
    "RoleAssignment",
    "assign_roles",
    "PartitionedBuffer",
]

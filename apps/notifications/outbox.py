"""
Outbox events.
Cascades never write notifications themselves: they append these events to their
result and the dispatcher drains them once the domain mutation is done.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class NotificationRequest:
    type: str
    title: str
    message: str
    related_model: str
    related_id: str
    recipients: list
    metadata: dict = field(default_factory=dict)
    created_by: str = ""


@dataclass
class NotificationResolution:
    """Resolve every pending notification on an entity (optionally only some types)."""
    related_model: str
    related_id: str
    resolved_by: str
    types: Optional[tuple] = None

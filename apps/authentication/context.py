"""
Acting identity carried through every cascade.
Used for attribution (created_by, cancelled_by, resolved_by) and notification targeting.
"""

from dataclasses import dataclass
from typing import Optional

from fleetledger.conf import fleet_setting

SYSTEM_USERNAME = "system"


@dataclass(frozen=True)
class Actor:
    username: str
    role: str
    user_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(username=user.username, role=user.role, user_id=str(user.pk))

    @classmethod
    def system(cls) -> "Actor":
        return cls(username=SYSTEM_USERNAME, role=SYSTEM_USERNAME)

    @property
    def is_admin_tier(self) -> bool:
        return self.role in fleet_setting("ADMIN_ROLES")

    def __str__(self):
        return self.username

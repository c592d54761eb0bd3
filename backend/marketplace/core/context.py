"""
Per-request caller identity.

Built once by the authentication dependency and passed explicitly to
services instead of being attached to the request object.
"""

from dataclasses import dataclass
from typing import Optional

ROLE_CUSTOMER = "customer"
ROLE_VENDOR = "vendor"
ROLE_ADMIN = "admin"
ROLES = (ROLE_CUSTOMER, ROLE_VENDOR, ROLE_ADMIN)


@dataclass(frozen=True)
class RequestContext:
    user_id: int
    role: str
    request_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_vendor(self) -> bool:
        return self.role == ROLE_VENDOR

    @property
    def is_customer(self) -> bool:
        return self.role == ROLE_CUSTOMER

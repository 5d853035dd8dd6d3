from dataclasses import dataclass, asdict
from typing import Optional

from carrental.utils.constants import Role


@dataclass
class User:
    """
    Profile document kept alongside the identity provider's account.
    The id is the provider's stable user id.
    """
    id: str
    name: str
    email: str
    role: str = Role.CUSTOMER  # "customer" | "admin"
    phone: Optional[str] = None
    address: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        return cls(
            id=str(d.get("id") or ""),
            name=d.get("name") or "User",
            email=d.get("email", ""),
            role=d.get("role") or Role.CUSTOMER,
            phone=d.get("phone"),
            address=d.get("address"),
        )

from __future__ import annotations

import logging
from typing import Optional

from carrental.exceptions import UserNotFoundError, ValidationError
from carrental.models.user import User
from carrental.services.common import _store, clean, load_user
from carrental.utils.constants import USERS, ACCOUNTS, Role

logger = logging.getLogger(__name__)


class UserService:
    """Profile editing and admin user management."""

    @staticmethod
    def get_user(user_id: str) -> User:
        u = load_user(user_id)
        if u is None:
            raise UserNotFoundError()
        return u

    @staticmethod
    def update_profile(user_id: str, name: str, phone: Optional[str] = None,
                       address: Optional[str] = None) -> User:
        """Update the editable profile fields; the display name is mirrored onto the account."""
        name = clean(name)
        if not name:
            raise ValidationError("Name is required.")
        st = _store()
        if st.get(USERS, user_id) is None:
            raise UserNotFoundError()
        st.update(USERS, user_id, {
            "name": name,
            "phone": clean(phone) or None,
            "address": clean(address) or None,
        })
        if st.get(ACCOUNTS, user_id) is not None:
            st.update(ACCOUNTS, user_id, {"display_name": name})
        return UserService.get_user(user_id)

    @staticmethod
    def list_users(role: Optional[str] = None) -> list[User]:
        """All users sorted by name, optionally only one role ('all' or None for everyone)."""
        users = [User.from_dict(d) for d in _store().list_all(USERS)]
        if role and role != "all":
            users = [u for u in users if u.role == role]
        return sorted(users, key=lambda u: u.name.lower())

    @staticmethod
    def admin_set_role(user_id: str, role: str):
        role = (role or "").lower().strip()
        if role not in Role.ALL:
            return False, "Role must be customer/admin"
        if load_user(user_id) is None:
            return False, "User not found"
        _store().update(USERS, user_id, {"role": role})
        logger.info("User %s role set to %s", user_id, role)
        return True, f"User role updated to {role}"

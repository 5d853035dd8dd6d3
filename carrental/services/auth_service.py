"""
Email/password identity provider and the session object handed to handlers.

Accounts (credentials) live in the `accounts` collection; the public profile
lives in `users` under the same id. A profile is created on the first
successful authentication if it is missing, with the `customer` role.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from flask import has_request_context, session

from carrental.exceptions import AuthError, ValidationError
from carrental.services.common import _store, clean
from carrental.utils.constants import ACCOUNTS, USERS, Role
from carrental.utils.security import generate_hash, check_hash, valid_email, valid_password

logger = logging.getLogger(__name__)

SESSION_KEY = "uid"


@dataclass(frozen=True)
class AuthSession:
    """Read-only view of the signed-in user, passed explicitly to services."""
    user_id: str
    email: str
    display_name: str
    role: str = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


Listener = Callable[[Optional[AuthSession]], None]


class IdentityProvider:
    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    # ---------- session-changed stream ----------
    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a callback fired with the new session (None on sign-out). Returns an unsubscribe function."""
        if callback not in self._listeners:
            self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, auth: Optional[AuthSession]) -> None:
        for cb in list(self._listeners):
            cb(auth)

    # ---------- accounts ----------
    def _find_account(self, email: str) -> Optional[dict]:
        rows = _store().query(ACCOUNTS, where={"email": email})
        return rows[0] if rows else None

    def _ensure_profile(self, account: dict) -> dict:
        st = _store()
        profile = st.get(USERS, account["id"])
        if profile is None:
            profile = {
                "name": account.get("display_name") or "User",
                "email": account["email"],
                "role": Role.CUSTOMER,
            }
            st.put(USERS, account["id"], profile)
            profile = st.get(USERS, account["id"])
            logger.info("Created profile for %s", account["email"])
        return profile

    @staticmethod
    def _to_session(profile: dict) -> AuthSession:
        return AuthSession(
            user_id=profile["id"],
            email=profile.get("email", ""),
            display_name=profile.get("name") or "User",
            role=profile.get("role") or Role.CUSTOMER,
        )

    def sign_up(self, email: str, password: str, display_name: str) -> AuthSession:
        email = clean(email).lower()
        display_name = clean(display_name)
        if not email or not password or not display_name:
            raise ValidationError("Name, email and password are required.")
        if not valid_email(email):
            raise ValidationError("Please enter a valid email address.")
        if not valid_password(password):
            raise ValidationError("Password must have at least 6 characters, including letters and digits.")
        if self._find_account(email):
            raise AuthError("An account with this email already exists.")

        uid = uuid.uuid4().hex
        _store().put(ACCOUNTS, uid, {
            "email": email,
            "password_hash": generate_hash(password),
            "display_name": display_name,
        })
        auth = self._to_session(self._ensure_profile(_store().get(ACCOUNTS, uid)))
        logger.info("Registered %s", email)
        self._emit(auth)
        return auth

    def sign_in(self, email: str, password: str) -> AuthSession:
        email = clean(email).lower()
        account = self._find_account(email)
        if not account or not check_hash(password or "", account.get("password_hash", "")):
            raise AuthError("Invalid email or password.")
        auth = self._to_session(self._ensure_profile(account))
        self._emit(auth)
        return auth

    def sign_out(self) -> None:
        self._emit(None)

    # ---------- sessions ----------
    def session_for(self, user_id: Optional[str]) -> Optional[AuthSession]:
        """Build the session object for a user id; None if the profile is gone."""
        if not user_id:
            return None
        profile = _store().get(USERS, user_id)
        return self._to_session(profile) if profile else None

    def current_session(self) -> Optional[AuthSession]:
        """Session of the current request's cookie, or None outside a request / when signed out."""
        if not has_request_context():
            return None
        return self.session_for(session.get(SESSION_KEY))


identity = IdentityProvider()

from __future__ import annotations

from typing import Optional

from carrental.exceptions import Unauthenticated, VehicleNotFoundError
from carrental.models.store import subcollection
from carrental.models.vehicle import Vehicle
from carrental.services.auth_service import AuthSession
from carrental.services.common import _store, _now, load_vehicle
from carrental.utils.constants import USERS


def favorites_path(user_id: str) -> str:
    return subcollection(USERS, user_id, "favorites")


def _require(auth: Optional[AuthSession]) -> AuthSession:
    if auth is None:
        raise Unauthenticated("Please sign in to add favorites")
    return auth


class FavoritesService:
    """Per-user favorite vehicles, one document per vehicle id."""

    @staticmethod
    def list_favorites(auth: Optional[AuthSession]) -> list[Vehicle]:
        """Favorite vehicles that still exist, in the order they were added."""
        if auth is None:
            return []
        out = []
        for fav in _store().query(favorites_path(auth.user_id), order_by="added_at"):
            v = load_vehicle(fav.get("vehicle_id"))
            if v is not None:
                out.append(v)
        return out

    @staticmethod
    def favorite_ids(auth: Optional[AuthSession]) -> set[str]:
        if auth is None:
            return set()
        return {f["id"] for f in _store().list_all(favorites_path(auth.user_id))}

    @staticmethod
    def is_favorite(auth: Optional[AuthSession], vehicle_id: str) -> bool:
        return vehicle_id in FavoritesService.favorite_ids(auth)

    @staticmethod
    def count(auth: Optional[AuthSession]) -> int:
        return len(FavoritesService.favorite_ids(auth))

    @staticmethod
    def add(auth: Optional[AuthSession], vehicle_id: str) -> None:
        auth = _require(auth)
        if load_vehicle(vehicle_id) is None:
            raise VehicleNotFoundError()
        _store().put(favorites_path(auth.user_id), vehicle_id, {
            "vehicle_id": vehicle_id,
            "added_at": _now().isoformat(),
        })

    @staticmethod
    def remove(auth: Optional[AuthSession], vehicle_id: str) -> bool:
        auth = _require(auth)
        return _store().delete(favorites_path(auth.user_id), vehicle_id)

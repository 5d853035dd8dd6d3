"""
Per-user favorites stored as a subcollection of the user document.
"""
import pytest

from conftest import put_vehicle, make_auth
from carrental.exceptions import Unauthenticated, VehicleNotFoundError
from carrental.services.favorites_service import FavoritesService, favorites_path


def test_add_list_and_remove(store):
    put_vehicle(store, "v1")
    put_vehicle(store, "v2", make="Honda")
    auth = make_auth()

    FavoritesService.add(auth, "v2")
    FavoritesService.add(auth, "v1")

    assert [v.id for v in FavoritesService.list_favorites(auth)] == ["v2", "v1"]
    assert FavoritesService.is_favorite(auth, "v1")
    assert FavoritesService.count(auth) == 2

    assert FavoritesService.remove(auth, "v2") is True
    assert FavoritesService.favorite_ids(auth) == {"v1"}


def test_adding_twice_keeps_one_entry(store):
    put_vehicle(store, "v1")
    auth = make_auth()
    FavoritesService.add(auth, "v1")
    FavoritesService.add(auth, "v1")
    assert store.count(favorites_path("u1")) == 1


def test_favorites_are_per_user(store):
    put_vehicle(store, "v1")
    FavoritesService.add(make_auth("u1"), "v1")
    assert FavoritesService.favorite_ids(make_auth("u2")) == set()


def test_deleted_vehicle_is_skipped_in_list(store):
    put_vehicle(store, "v1")
    auth = make_auth()
    FavoritesService.add(auth, "v1")
    store.delete("vehicles", "v1")
    assert FavoritesService.list_favorites(auth) == []


def test_anonymous_user_has_no_favorites(store):
    assert FavoritesService.list_favorites(None) == []
    assert FavoritesService.count(None) == 0
    with pytest.raises(Unauthenticated):
        FavoritesService.add(None, "v1")


def test_cannot_favorite_missing_vehicle(store):
    with pytest.raises(VehicleNotFoundError):
        FavoritesService.add(make_auth(), "ghost")

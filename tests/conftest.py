"""
Shared fixtures.

Unit tests swap every repository function for an in-memory `FakeCatalog`
that mirrors the SQL semantics the services rely on (owner filters,
primary-key dedupe of tags, cascades).
"""

from __future__ import annotations

import itertools
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

import main
from albums import repository as albums_repository
from auth import repository as auth_repository
from auth import security
from images import repository as images_repository
from users import repository as users_repository

KNOWN_ROLES = {"Admin", "User"}


class FakeCatalog:
    def __init__(self) -> None:
        self.users: dict[int, dict] = {}
        self.user_roles: dict[int, str] = {}
        self.sessions: dict[str, dict] = {}
        self.albums: dict[int, dict] = {}
        self.album_tags: dict[int, set[str]] = {}
        self.images: dict[int, dict] = {}
        self.image_tags: dict[int, set[str]] = {}
        self.album_images: dict[tuple[int, int], dict] = {}
        self._ids = itertools.count(1)

    # -- seeding helpers ---------------------------------------------------

    def add_user(self, username: str, password: str, role: str | None = "User") -> int:
        user_id = next(self._ids)
        self.users[user_id] = {
            "id": user_id,
            "username": username,
            "password_hash": security.hash_password(password),
        }
        if role is not None:
            self.user_roles[user_id] = role
        return user_id

    def open_session(self, user_id: int) -> str:
        raw = security.build_session_token()
        self.sessions[security.hash_session_token(raw)] = {
            "id": next(self._ids),
            "user_id": user_id,
            "revoked": False,
        }
        return raw

    # -- auth.repository ---------------------------------------------------

    async def get_credentials_by_username(self, username: str) -> dict | None:
        for user in self.users.values():
            if user["username"] == username:
                return {"id": user["id"], "password_hash": user["password_hash"]}
        return None

    async def get_user_with_role(self, user_id: int) -> dict | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        return {"id": user_id, "username": user["username"], "role": self.user_roles.get(user_id)}

    async def get_role_names(self, user_id: int) -> list[str]:
        role = self.user_roles.get(user_id)
        return [role] if role else []

    async def insert_session(self, *, user_id: int, token_hash: str, expires_at: datetime) -> dict:
        row = {"id": next(self._ids), "user_id": user_id, "revoked": False}
        self.sessions[token_hash] = row
        return {"id": row["id"], "user_id": user_id, "expires_at": expires_at}

    async def get_live_session(self, token_hash: str) -> dict | None:
        row = self.sessions.get(token_hash)
        if row is None or row["revoked"]:
            return None
        return {"id": row["id"], "user_id": row["user_id"], "expires_at": None}

    async def revoke_session(self, token_hash: str) -> bool:
        row = self.sessions.get(token_hash)
        if row is None or row["revoked"]:
            return False
        row["revoked"] = True
        return True

    # -- users.repository --------------------------------------------------

    async def create_user_with_role(self, *, username: str, password_hash: str, role: str) -> int:
        if any(user["username"] == username for user in self.users.values()):
            raise users_repository.UsernameTakenError("Username already exists.")
        if role not in KNOWN_ROLES:
            raise users_repository.RoleAssignmentError(f"Role {role!r} does not exist.")
        user_id = next(self._ids)
        self.users[user_id] = {"id": user_id, "username": username, "password_hash": password_hash}
        self.user_roles[user_id] = role
        return user_id

    async def get_user_id_by_username(self, username: str) -> int | None:
        for user in self.users.values():
            if user["username"] == username:
                return user["id"]
        return None

    async def update_user(self, user_id: int, *, username: str, password_hash: str) -> bool:
        if user_id not in self.users:
            return False
        if any(u["username"] == username and u["id"] != user_id for u in self.users.values()):
            raise users_repository.UsernameTakenError("Username already exists.")
        self.users[user_id].update(username=username, password_hash=password_hash)
        return True

    async def delete_user(self, user_id: int) -> bool:
        if self.users.pop(user_id, None) is None:
            return False
        self.user_roles.pop(user_id, None)
        for album_id in [a for a, row in self.albums.items() if row["user_id"] == user_id]:
            self._drop_album(album_id)
        for image_id in [i for i, row in self.images.items() if row["user_id"] == user_id]:
            self._drop_image(image_id)
        return True

    async def count_users(self) -> int:
        return len(self.users)

    async def list_all_users(self) -> list[dict]:
        return await self.list_users(limit=len(self.users), offset=0)

    async def list_users(self, *, limit: int, offset: int) -> list[dict]:
        ordered = sorted(self.users)[offset : offset + limit]
        return [
            {"id": uid, "username": self.users[uid]["username"], "role": self.user_roles.get(uid)}
            for uid in ordered
        ]

    # -- albums.repository -------------------------------------------------

    def _album_row(self, album_id: int) -> dict:
        album = self.albums[album_id]
        return {"id": album_id, "title": album["title"], "tags": sorted(self.album_tags[album_id])}

    def _drop_album(self, album_id: int) -> None:
        self.albums.pop(album_id, None)
        self.album_tags.pop(album_id, None)
        for key in [k for k in self.album_images if k[0] == album_id]:
            del self.album_images[key]

    async def list_albums(self, *, user_id: int) -> list[dict]:
        return [self._album_row(a) for a in sorted(self.albums) if self.albums[a]["user_id"] == user_id]

    async def get_album(self, album_id: int, *, user_id: int) -> dict | None:
        album = self.albums.get(album_id)
        if album is None or album["user_id"] != user_id:
            return None
        return self._album_row(album_id)

    async def create_album(self, *, user_id: int, title: str, tags: list[str]) -> int | None:
        if user_id not in self.users:
            return None
        album_id = next(self._ids)
        self.albums[album_id] = {"id": album_id, "user_id": user_id, "title": title}
        self.album_tags[album_id] = set(tags)
        return album_id

    async def update_album(self, album_id: int, *, user_id: int, title: str, tags: list[str]) -> bool:
        album = self.albums.get(album_id)
        if album is None or album["user_id"] != user_id:
            return False
        album["title"] = title
        self.album_tags[album_id] = set(tags)
        return True

    async def delete_album(self, album_id: int, *, user_id: int) -> bool:
        album = self.albums.get(album_id)
        if album is None or album["user_id"] != user_id:
            return False
        self._drop_album(album_id)
        return True

    # -- images.repository -------------------------------------------------

    def _image_row(self, image_id: int) -> dict:
        image = self.images[image_id]
        return {
            "id": image_id,
            "title": image["title"],
            "date": image["date"],
            "path": image["path"],
            "tags": sorted(self.image_tags[image_id]),
        }

    def _drop_image(self, image_id: int) -> None:
        self.images.pop(image_id, None)
        self.image_tags.pop(image_id, None)
        for key in [k for k in self.album_images if k[1] == image_id]:
            del self.album_images[key]

    def _owned_image(self, image_id: int, user_id: int) -> dict | None:
        image = self.images.get(image_id)
        return image if image is not None and image["user_id"] == user_id else None

    def _owned_album(self, album_id: int, user_id: int) -> dict | None:
        album = self.albums.get(album_id)
        return album if album is not None and album["user_id"] == user_id else None

    async def list_images(self, *, user_id: int) -> list[dict]:
        return [self._image_row(i) for i in sorted(self.images) if self.images[i]["user_id"] == user_id]

    async def get_image(self, image_id: int, *, user_id: int) -> dict | None:
        if self._owned_image(image_id, user_id) is None:
            return None
        return self._image_row(image_id)

    async def create_image(self, *, user_id, title, taken_on, path, tags) -> int | None:
        if user_id not in self.users:
            return None
        image_id = next(self._ids)
        self.images[image_id] = {
            "id": image_id,
            "user_id": user_id,
            "title": title,
            "date": taken_on,
            "path": path,
        }
        self.image_tags[image_id] = set(tags)
        return image_id

    async def update_image(self, image_id, *, user_id, title, taken_on, path, tags) -> bool:
        image = self._owned_image(image_id, user_id)
        if image is None:
            return False
        image.update(title=title, date=taken_on, path=path or image["path"])
        self.image_tags[image_id] = set(tags)
        return True

    async def delete_image(self, image_id: int, *, user_id: int) -> bool:
        if self._owned_image(image_id, user_id) is None:
            return False
        self._drop_image(image_id)
        return True

    async def list_album_images(self, album_id: int, *, user_id: int) -> list[dict]:
        if self._owned_album(album_id, user_id) is None:
            return []
        rows = []
        for (a_id, i_id), override in sorted(self.album_images.items()):
            if a_id != album_id:
                continue
            image = self.images[i_id]
            rows.append(
                {
                    "id": i_id,
                    "title": override.get("title") or image["title"],
                    "date": override.get("date") or image["date"],
                    "path": override.get("path") or image["path"],
                }
            )
        return rows

    async def add_image_to_album(self, album_id: int, image_id: int, *, user_id: int) -> bool:
        if self._owned_album(album_id, user_id) is None or self._owned_image(image_id, user_id) is None:
            return False
        if (album_id, image_id) in self.album_images:
            return False
        self.album_images[(album_id, image_id)] = {}
        return True

    async def remove_image_from_album(self, album_id: int, image_id: int, *, user_id: int) -> bool:
        if self._owned_album(album_id, user_id) is None:
            return False
        return self.album_images.pop((album_id, image_id), None) is not None

    async def update_image_in_album(self, album_id, image_id, *, user_id, title, taken_on, path) -> bool:
        if self._owned_album(album_id, user_id) is None or (album_id, image_id) not in self.album_images:
            return False
        self.album_images[(album_id, image_id)] = {"title": title, "date": taken_on, "path": path}
        return True


_PATCHED = {
    auth_repository: (
        "get_credentials_by_username",
        "get_user_with_role",
        "get_role_names",
        "insert_session",
        "get_live_session",
        "revoke_session",
    ),
    users_repository: (
        "create_user_with_role",
        "get_user_id_by_username",
        "update_user",
        "delete_user",
        "count_users",
        "list_all_users",
        "list_users",
    ),
    albums_repository: (
        "list_albums",
        "get_album",
        "create_album",
        "update_album",
        "delete_album",
    ),
    images_repository: (
        "list_images",
        "get_image",
        "create_image",
        "update_image",
        "delete_image",
        "list_album_images",
        "add_image_to_album",
        "remove_image_from_album",
        "update_image_in_album",
    ),
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def catalog(monkeypatch) -> FakeCatalog:
    fake = FakeCatalog()
    for module, names in _PATCHED.items():
        for name in names:
            monkeypatch.setattr(module, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(catalog) -> TestClient:
    # No `with` block: the lifespan (and its real DB pool) is not started.
    return TestClient(main.app)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(catalog) -> dict:
    user_id = catalog.add_user("alice", "alice-password")
    return {"id": user_id, "headers": auth_headers(catalog.open_session(user_id))}


@pytest.fixture
def bob(catalog) -> dict:
    user_id = catalog.add_user("bob", "bob-password")
    return {"id": user_id, "headers": auth_headers(catalog.open_session(user_id))}


@pytest.fixture
def admin(catalog) -> dict:
    user_id = catalog.add_user("root", "root-password", role="Admin")
    return {"id": user_id, "headers": auth_headers(catalog.open_session(user_id))}


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    import bcrypt

    real_gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": real_gensalt(rounds=4, prefix=prefix))

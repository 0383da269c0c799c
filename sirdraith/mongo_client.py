from __future__ import annotations
import logging
from typing import Iterable

from pymongo import MongoClient

from .config_loader import AppUserConfig, Settings
from .schemas.types import CollectionSpec

logger = logging.getLogger(__name__)


def get_client(s: Settings) -> MongoClient:
    kwargs = {"serverSelectionTimeoutMS": s.mongo.timeout_ms}
    if s.mongo.root_username and s.mongo.root_password:
        kwargs.update(
            username=s.mongo.root_username,
            password=s.mongo.root_password,
            authSource=s.mongo.auth_source,
        )
    return MongoClient(s.mongo.url, **kwargs)


def get_db(client: MongoClient, s: Settings):
    return client[s.app.database]


def ping(client) -> None:
    client["admin"].command("ping")


def user_exists(user_db, user: str) -> bool:
    resp = user_db.command("usersInfo", user)
    return bool(resp.get("users"))


def create_app_user(user_db, app: AppUserConfig, *, skip_existing: bool = False) -> bool:
    """Create the application user with readWrite on ``app.database``.

    Returns False when ``skip_existing`` is set and the user is already there.
    Without it a duplicate user is the server's error to raise.
    """
    if skip_existing and user_exists(user_db, app.user):
        logger.info(
            "app user already exists, skipping",
            extra={"user": app.user, "user_db": user_db.name},
        )
        return False
    user_db.command(
        "createUser",
        app.user,
        pwd=app.password,
        roles=[{"role": "readWrite", "db": app.database}],
    )
    logger.info(
        "app user created",
        extra={"user": app.user, "user_db": user_db.name, "grant_db": app.database},
    )
    return True


def apply_schema(
    db, collections: Iterable[CollectionSpec], *, skip_existing: bool = False
) -> dict[str, list[str]]:
    existing = set(db.list_collection_names()) if skip_existing else set()
    created: dict[str, list[str]] = {}
    for coll in collections:
        if coll.name in existing:
            logger.info("collection exists, skipping create", extra={"collection": coll.name})
        else:
            db.create_collection(coll.name)
        names = []
        for idx in coll.indexes:
            names.append(db[coll.name].create_index(idx.key_pattern, **idx.options()))
        logger.info("collection ready", extra={"collection": coll.name, "indexes": names})
        created[coll.name] = names
    return created


def _normalize_key(key) -> list[tuple[str, int]]:
    # the server may report directions as floats
    return [(f, int(d)) for f, d in key]


def verify_schema(db, collections: Iterable[CollectionSpec]) -> list[str]:
    """Compare live indexes to the declarations; an empty list means they match."""
    problems: list[str] = []
    present = set(db.list_collection_names())
    for coll in collections:
        if coll.name not in present:
            problems.append(f"{coll.name}: collection missing")
            continue
        info = db[coll.name].index_information()
        info.pop("_id_", None)
        for idx in coll.indexes:
            name = idx.index_name
            live = info.pop(name, None)
            if live is None:
                problems.append(f"{coll.name}.{name}: index missing")
                continue
            if _normalize_key(live["key"]) != idx.key_pattern:
                problems.append(f"{coll.name}.{name}: key is {live['key']}, expected {idx.key_pattern}")
            if bool(live.get("unique", False)) != idx.unique:
                problems.append(f"{coll.name}.{name}: unique is {bool(live.get('unique'))}, expected {idx.unique}")
            if live.get("expireAfterSeconds") != idx.expire_after_seconds:
                problems.append(
                    f"{coll.name}.{name}: expireAfterSeconds is {live.get('expireAfterSeconds')}, "
                    f"expected {idx.expire_after_seconds}"
                )
        for extra in sorted(info):
            problems.append(f"{coll.name}.{extra}: index not declared")
    return problems

from __future__ import annotations
import logging

from ..config_loader import Settings
from ..mongo_client import apply_schema, create_app_user
from ..schema import COLLECTIONS

logger = logging.getLogger(__name__)


def bootstrap_mongo(settings: Settings, client, *, skip_existing: bool = False):
    """Create the app user, then the collections and indexes of the app database.

    Steps run strictly in order and the first failure aborts the rest;
    whatever was created before it stays in place.
    """
    user_db = client[settings.mongo.auth_source]
    user_created = create_app_user(user_db, settings.app, skip_existing=skip_existing)

    # only switch databases once the user exists
    db = client[settings.app.database]
    indexes = apply_schema(db, COLLECTIONS, skip_existing=skip_existing)

    return {
        "ok": True,
        "database": settings.app.database,
        "user": settings.app.user,
        "user_created": user_created,
        "collections": list(indexes),
    }

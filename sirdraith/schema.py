from __future__ import annotations

from .schemas.types import CollectionSpec, IndexSpec

# logs are dropped by the server 30 days after their timestamp
LOG_RETENTION_SECONDS = 30 * 24 * 60 * 60

COLLECTIONS: tuple[CollectionSpec, ...] = (
    CollectionSpec(
        name="characters",
        indexes=[
            IndexSpec.on("userId"),
            IndexSpec.on("name", unique=True),
            IndexSpec.on("class"),
            IndexSpec.on("level"),
        ],
    ),
    CollectionSpec(
        name="cards",
        indexes=[
            IndexSpec.on("name", unique=True),
            IndexSpec.on("type"),
            IndexSpec.on("rarity"),
        ],
    ),
    CollectionSpec(
        name="events",
        indexes=[
            IndexSpec.on("type"),
            IndexSpec.on("createdAt"),
        ],
    ),
    CollectionSpec(
        name="logs",
        indexes=[
            IndexSpec.on("timestamp"),
            IndexSpec.on("type"),
            IndexSpec.on("userId"),
            # separate from timestamp_1: that one serves range queries, this one drives expiry.
            # Real servers may reject a second index on {timestamp: 1} with IndexOptionsConflict;
            # mongomock accepts it, so the tests cannot show that rejection.
            IndexSpec.on(
                "timestamp",
                expire_after_seconds=LOG_RETENTION_SECONDS,
                name="timestamp_ttl",
            ),
        ],
    ),
)


def collection_names() -> list[str]:
    return [c.name for c in COLLECTIONS]


def plan_requests(app, auth_source: str = "admin") -> list[dict]:
    """Ordered administrative requests issued by a bootstrap run.

    The password is redacted so the plan can be logged as-is.
    """
    requests: list[dict] = [
        {
            "op": "createUser",
            "db": auth_source,
            "user": app.user,
            "pwd": "***",
            "roles": [{"role": "readWrite", "db": app.database}],
        },
        {"op": "use", "db": app.database},
    ]
    for coll in COLLECTIONS:
        requests.append({"op": "createCollection", "collection": coll.name})
        for idx in coll.indexes:
            requests.append(
                {
                    "op": "createIndex",
                    "collection": coll.name,
                    "keys": dict(idx.key_pattern),
                    **idx.options(),
                }
            )
    return requests

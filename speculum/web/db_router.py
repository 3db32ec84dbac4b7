"""
Router for everything that needs the database.

The readiness gate is applied once, as router-level dependency, so it runs
before any other dependency of every mounted route. When it raises, none of
the feature handlers execute. The gate itself is owned by the caller, which
keeps control over the database lifecycle.

The gate runs only once a request has matched a route. Unmatched paths (404),
wrong methods (405) and bodies that are not valid JSON (422) are answered by
FastAPI before the gate; schema validation of a well-formed body happens
after it.
"""

from typing import Callable, Mapping, Optional

from fastapi import APIRouter, Depends

# (prefix, route group) in mount order; "" mounts at the site root
DB_ROUTE_TABLE: tuple[tuple[str, str], ...] = (
    ("", "static_router"),
    ("", "sitemap_router"),
    ("/auth", "auth_router"),
    ("/blogpost", "post_router"),
    ("/upload", "upload_router"),
    ("/comments", "comments_router"),
    ("/cards", "card_router"),
)


class RouterConfigurationError(ValueError):
    """Raised at startup when a required route group is missing."""


def create_db_router(
    require_database: Callable[..., object],
    routes: Mapping[str, Optional[APIRouter]],
) -> APIRouter:
    """
    Compose the DB-dependent routers behind a single readiness gate.

    Args:
        require_database: dependency that returns to let the request through
            or raises (e.g. HTTPException 503) to reject it
        routes: route group name -> router, for every name in DB_ROUTE_TABLE

    Returns:
        A new router; the caller includes it into the application

    Raises:
        RouterConfigurationError: if a route group is missing
    """
    missing = [name for _, name in DB_ROUTE_TABLE if routes.get(name) is None]
    if missing:
        raise RouterConfigurationError(
            f"Missing route groups for the database router: {', '.join(missing)}"
        )

    db_router = APIRouter(dependencies=[Depends(require_database)])

    for prefix, name in DB_ROUTE_TABLE:
        db_router.include_router(routes[name], prefix=prefix)

    return db_router

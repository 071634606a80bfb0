"""
Registry API routes for crates and their sub-resources.

Handlers are thin: they collect query parameters and the current user and
delegate to `Registry`, which raises `RegistryError`s for the 404 / 403 /
"unknown version" cases. Those are rendered by the handlers installed in
`registry_mock.main`.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from registry_mock.core.config import ServerConfig
from registry_mock.core.dependencies import get_config, get_current_user, get_registry
from registry_mock.domain.entities import Registry
from registry_mock.domain.errors import BadRequest
from registry_mock.domain.models import CrateListQuery, UserRecord
from registry_mock.domain.registry_utils import is_truthy

router = APIRouter()


def _page_size(per_page: Optional[int], config: ServerConfig) -> int:
    if per_page is None:
        return config.default_per_page
    if per_page > config.max_per_page:
        raise BadRequest(f"cannot request more than {config.max_per_page} items")
    return per_page


# ---------------------------------------------------------------------------
# GET /crates
# ---------------------------------------------------------------------------

@router.get("/crates")
def list_crates(
    page: int = Query(default=1, ge=1),
    per_page: Optional[int] = Query(default=None, ge=1),
    letter: Optional[str] = None,
    q: Optional[str] = None,
    user_id: Optional[int] = None,
    team_id: Optional[int] = None,
    following: Optional[str] = None,
    sort: Optional[str] = None,
    registry: Registry = Depends(get_registry),
    config: ServerConfig = Depends(get_config),
    current_user: Optional[UserRecord] = Depends(get_current_user),
) -> dict:
    query = CrateListQuery(
        letter=letter,
        q=q,
        user_id=user_id,
        team_id=team_id,
        following=is_truthy(following),
        sort=sort,
    )
    return registry.list_crates(query, page, _page_size(per_page, config), current_user)


# ---------------------------------------------------------------------------
# GET /crates/{crate_id}
# ---------------------------------------------------------------------------

@router.get("/crates/{crate_id}")
def get_crate(crate_id: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.crate_detail(crate_id)


# ---------------------------------------------------------------------------
# Following
# ---------------------------------------------------------------------------

@router.get("/crates/{crate_id}/following")
def get_following(
    crate_id: str,
    registry: Registry = Depends(get_registry),
    current_user: Optional[UserRecord] = Depends(get_current_user),
) -> dict:
    return registry.is_following(crate_id, current_user)


@router.put("/crates/{crate_id}/follow")
def follow_crate(
    crate_id: str,
    registry: Registry = Depends(get_registry),
    current_user: Optional[UserRecord] = Depends(get_current_user),
) -> dict:
    return registry.follow(crate_id, current_user)


@router.delete("/crates/{crate_id}/follow")
def unfollow_crate(
    crate_id: str,
    registry: Registry = Depends(get_registry),
    current_user: Optional[UserRecord] = Depends(get_current_user),
) -> dict:
    return registry.unfollow(crate_id, current_user)


# ---------------------------------------------------------------------------
# Versions
# ---------------------------------------------------------------------------

@router.get("/crates/{crate_id}/versions")
def list_versions(crate_id: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.list_versions(crate_id)


@router.get("/crates/{crate_id}/{version}/authors")
def version_authors(crate_id: str, version: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.version_authors(crate_id, version)


@router.get("/crates/{crate_id}/{version}/dependencies")
def version_dependencies(crate_id: str, version: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.version_dependencies(crate_id, version)


@router.get("/crates/{crate_id}/{version}/downloads")
def version_downloads(crate_id: str, version: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.version_downloads(crate_id, version)


# ---------------------------------------------------------------------------
# Owners
# ---------------------------------------------------------------------------

@router.get("/crates/{crate_id}/owner_user")
def owner_users(crate_id: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.owner_users(crate_id)


@router.get("/crates/{crate_id}/owner_team")
def owner_teams(crate_id: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.owner_teams(crate_id)


# ---------------------------------------------------------------------------
# Reverse dependencies and downloads
# ---------------------------------------------------------------------------

@router.get("/crates/{crate_id}/reverse_dependencies")
def reverse_dependencies(
    crate_id: str,
    page: int = Query(default=1, ge=1),
    per_page: Optional[int] = Query(default=None, ge=1),
    registry: Registry = Depends(get_registry),
    config: ServerConfig = Depends(get_config),
) -> dict:
    return registry.reverse_dependencies(crate_id, page, _page_size(per_page, config))


@router.get("/crates/{crate_id}/downloads")
def crate_downloads(crate_id: str, registry: Registry = Depends(get_registry)) -> dict:
    return registry.crate_downloads(crate_id)

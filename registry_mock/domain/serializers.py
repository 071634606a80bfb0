"""
JSON projections of store records, matching the registry API payloads.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from registry_mock.domain.models import (
    CategoryRecord,
    DependencyRecord,
    KeywordRecord,
    TeamRecord,
    UserRecord,
    VersionDownloadRecord,
    VersionRecord,
)


def serialize_user(user: UserRecord, kind: Optional[str] = None) -> Dict[str, Any]:
    """
    Public user representation. Owner listings add `kind: "user"`;
    `published_by` embeds the user without it.
    """
    data = {
        "id": user.id,
        "avatar": user.avatar,
        "login": user.login,
        "name": user.name,
        "url": user.url,
    }
    if kind is not None:
        data["kind"] = kind
    return data


def serialize_team(team: TeamRecord) -> Dict[str, Any]:
    return {
        "id": team.id,
        "avatar": team.avatar,
        "kind": "team",
        "login": team.login,
        "name": team.name,
        "url": team.url,
    }


def serialize_version(
    version: VersionRecord,
    publisher: Optional[UserRecord],
    api_prefix: str,
) -> Dict[str, Any]:
    base = f"{api_prefix}/crates/{version.crate_id}/{version.num}"
    return {
        "id": version.id,
        "crate": version.crate_id,
        "crate_size": version.crate_size,
        "created_at": version.created_at,
        "dl_path": f"{base}/download",
        "downloads": version.downloads,
        "license": version.license,
        "links": {
            "authors": f"{base}/authors",
            "dependencies": f"{base}/dependencies",
            "version_downloads": f"{base}/downloads",
        },
        "num": version.num,
        "published_by": serialize_user(publisher) if publisher is not None else None,
        "updated_at": version.updated_at,
        "yanked": version.yanked,
    }


def serialize_dependency(dependency: DependencyRecord) -> Dict[str, Any]:
    return {
        "id": dependency.id,
        "crate_id": dependency.crate_id,
        "default_features": dependency.default_features,
        "features": list(dependency.features),
        "kind": dependency.kind,
        "optional": dependency.optional,
        "req": dependency.req,
        "target": dependency.target,
        "version_id": dependency.version_id,
    }


def serialize_version_download(download: VersionDownloadRecord) -> Dict[str, Any]:
    return {
        "date": download.date,
        "downloads": download.downloads,
        "version": download.version_id,
    }


def serialize_category(category: CategoryRecord, crates_cnt: int) -> Dict[str, Any]:
    return {
        "id": category.id,
        "category": category.category,
        "crates_cnt": crates_cnt,
        "created_at": category.created_at,
        "description": category.description,
        "slug": category.slug,
    }


def serialize_keyword(keyword: KeywordRecord, crates_cnt: int) -> Dict[str, Any]:
    return {
        "id": keyword.id,
        "crates_cnt": crates_cnt,
        "keyword": keyword.keyword,
    }

"""
Deterministic default values for every record kind.

Each factory receives the record's sequence index `i` (0-based, counted
per kind over the lifetime of the store) and the overrides that were
already resolved for this record, and returns the defaults for every
field that was not overridden. The per-index sequences (licenses, sizes,
download counts, requirement strings) keep test expectations stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, Type

from pydantic import BaseModel

from registry_mock.domain.models import (
    CategoryRecord,
    CrateOwnershipRecord,
    CrateRecord,
    DependencyRecord,
    KeywordRecord,
    TeamRecord,
    UserRecord,
    VersionDownloadRecord,
    VersionRecord,
)
from registry_mock.domain.registry_utils import dasherize

DEFAULT_CREATED_AT = "2010-06-16T21:30:45Z"
DEFAULT_UPDATED_AT = "2017-02-24T12:34:56Z"
DEFAULT_AVATAR = "https://avatars1.githubusercontent.com/u/14631425?v=4"
DEFAULT_TEAM_ORG = "rust-lang"
FIRST_DOWNLOAD_DATE = date(2019, 5, 21)

LICENSES = ["MIT/Apache-2.0", "MIT", "Apache-2.0"]
REQUIREMENTS = ["^0.1.0", "^2.1.3", "0.3.7", "~5.2.12"]


def _spread(i: int) -> int:
    # 0, 3, 6, 9, 12, 2, 5, ... for i = 0, 1, 2, ...
    return ((i + 13) * 42) % 13


def crate_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    name = attrs.get("name", f"crate-{i}")
    return {
        "name": name,
        "description": f'This is the description for the crate called "{name}"',
        "created_at": DEFAULT_CREATED_AT,
        "updated_at": DEFAULT_UPDATED_AT,
        "downloads": _spread(i) * 12345,
    }


def version_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(i + 1),
        "num": f"1.0.{i}",
        "created_at": DEFAULT_CREATED_AT,
        "updated_at": DEFAULT_UPDATED_AT,
        "license": LICENSES[i % len(LICENSES)],
        "downloads": _spread(i) * 1234,
        "crate_size": _spread(i) * 54321,
    }


def dependency_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(i + 1),
        "req": REQUIREMENTS[i % len(REQUIREMENTS)],
        "kind": "dev" if i % 3 == 0 else "normal",
        "optional": i % 4 != 3,
        "default_features": i % 4 == 3,
    }


def version_download_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": i + 1,
        "date": (FIRST_DOWNLOAD_DATE - timedelta(days=i)).isoformat(),
        "downloads": (((i * 42) % 13) + 4) * 2345,
    }


def user_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    name = attrs.get("name", f"User {i + 1}")
    login = attrs.get("login", dasherize(name))
    return {
        "id": i + 1,
        "name": name,
        "login": login,
        "url": f"https://github.com/{login}",
        "avatar": DEFAULT_AVATAR,
        "email": f"{login}@crates.io",
    }


def team_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    name = attrs.get("name", f"team-{i + 1}")
    org = attrs.get("org", DEFAULT_TEAM_ORG)
    return {
        "id": i + 1,
        "name": name,
        "org": org,
        "login": f"github:{org}:{name}",
        "url": f"https://github.com/{org}",
        "avatar": DEFAULT_AVATAR,
    }


def crate_ownership_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": i + 1}


def category_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    category = attrs.get("category", f"Category {i}")
    return {
        "category": category,
        "slug": dasherize(category),
        "description": f'This is the description for the category called "{category}"',
        "created_at": DEFAULT_CREATED_AT,
    }


def keyword_defaults(i: int, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {"keyword": f"keyword-{i + 1}"}


@dataclass(frozen=True)
class RecordFactory:
    model: Type[BaseModel]
    defaults: Callable[[int, Dict[str, Any]], Dict[str, Any]]
    # field name -> kind of the record it must point at
    references: Dict[str, str] = field(default_factory=dict)
    # fields holding lists of ids of another kind
    list_references: Dict[str, str] = field(default_factory=dict)
    # models without an `id` field get their sequence number here
    with_seq: bool = False


FACTORIES: Dict[str, RecordFactory] = {
    "user": RecordFactory(
        UserRecord,
        user_defaults,
        list_references={"followed_crate_ids": "crate"},
    ),
    "team": RecordFactory(TeamRecord, team_defaults),
    "category": RecordFactory(CategoryRecord, category_defaults, with_seq=True),
    "keyword": RecordFactory(KeywordRecord, keyword_defaults, with_seq=True),
    "crate": RecordFactory(
        CrateRecord,
        crate_defaults,
        list_references={"category_ids": "category", "keyword_ids": "keyword"},
        with_seq=True,
    ),
    "version": RecordFactory(
        VersionRecord,
        version_defaults,
        references={"crate_id": "crate", "published_by_id": "user"},
    ),
    "dependency": RecordFactory(
        DependencyRecord,
        dependency_defaults,
        references={"crate_id": "crate", "version_id": "version"},
    ),
    "version_download": RecordFactory(
        VersionDownloadRecord,
        version_download_defaults,
        references={"version_id": "version"},
    ),
    "crate_ownership": RecordFactory(
        CrateOwnershipRecord,
        crate_ownership_defaults,
        references={"crate_id": "crate", "user_id": "user", "team_id": "team"},
    ),
}

# Parents before children; the seed loader creates kinds in this order.
KIND_ORDER = list(FACTORIES)

# Relation shorthands: `crate=record` is stored as `crate_id=record.id`.
RELATION_ALIASES = {
    "crate": "crate_id",
    "version": "version_id",
    "user": "user_id",
    "team": "team_id",
    "published_by": "published_by_id",
}

LIST_RELATION_ALIASES = {
    "followed_crates": "followed_crate_ids",
    "categories": "category_ids",
    "keywords": "keyword_ids",
}

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Crate Models
# ---------------------------------------------------------------------------


class CrateRecord(BaseModel):
    """
    A publishable package unit.

    The crate name doubles as its identifier, so it is unique (and
    case-sensitive) within the store. `max_version`, `newest_version` and
    friends are NOT stored here; they are computed from the live set of
    versions every time a crate is rendered.
    """

    seq: int = Field(
        description="Sequence number assigned by the store (1-based, insertion order).",
    )
    name: str = Field(
        description="Crate name, also used as the public identifier.",
    )
    description: str = Field(
        description="Free-text description of the crate.",
    )
    created_at: str = Field(
        description="Creation timestamp in ISO-8601 format.",
    )
    updated_at: str = Field(
        description="Last update timestamp in ISO-8601 format.",
    )
    downloads: int = Field(
        default=0,
        description="Total download counter for the crate.",
    )
    homepage: Optional[str] = Field(default=None)
    documentation: Optional[str] = Field(default=None)
    repository: Optional[str] = Field(default=None)
    badges: List[dict] = Field(default_factory=list)
    category_ids: List[str] = Field(
        default_factory=list,
        description="Slugs of the categories this crate is listed in.",
    )
    keyword_ids: List[str] = Field(
        default_factory=list,
        description="Keywords attached to this crate.",
    )

    @property
    def id(self) -> str:
        return self.name


class VersionRecord(BaseModel):
    """
    A single published version of a crate.

    `published_by_id` is None for versions published by an actor the
    registry never recorded (legacy uploads).
    """

    id: str = Field(description="Version identifier ('1', '2', ...).")
    crate_id: str = Field(description="Name of the crate owning this version.")
    num: str = Field(description="Semantic version number, e.g. '1.0.0-beta.1'.")
    created_at: str
    updated_at: str
    license: Optional[str] = Field(default=None)
    crate_size: int = Field(default=0, description="Size of the .crate file in bytes.")
    downloads: int = Field(default=0)
    yanked: bool = Field(default=False)
    authors: List[str] = Field(
        default_factory=list,
        description="Free-text author strings from the crate manifest.",
    )
    published_by_id: Optional[int] = Field(
        default=None,
        description="Id of the user that published this version, if known.",
    )


class DependencyRecord(BaseModel):
    id: str
    crate_id: str = Field(description="Name of the crate being depended on.")
    version_id: str = Field(description="Id of the version declaring the dependency.")
    req: str = Field(description="Version requirement string, e.g. '^0.1.0'.")
    kind: str = Field(default="normal", description="One of 'normal', 'dev' or 'build'.")
    optional: bool = Field(default=False)
    default_features: bool = Field(default=True)
    features: List[str] = Field(default_factory=list)
    target: Optional[str] = Field(
        default=None,
        description="Optional target triple or cfg() expression.",
    )


class VersionDownloadRecord(BaseModel):
    """
    Download count of one version on one day.

    The store guarantees at most one record per (version_id, date).
    """

    id: int
    version_id: str
    date: str = Field(description="Day in ISO format (YYYY-MM-DD).")
    downloads: int = Field(default=0)


# ---------------------------------------------------------------------------
# Owner Models
# ---------------------------------------------------------------------------


class UserRecord(BaseModel):
    id: int
    login: str
    name: Optional[str] = Field(default=None)
    avatar: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    followed_crate_ids: List[str] = Field(
        default_factory=list,
        description="Names of the crates this user follows. Independent of ownership.",
    )


class TeamRecord(BaseModel):
    id: int
    login: str = Field(description="Namespaced login, e.g. 'github:rust-lang:maintainers'.")
    name: Optional[str] = Field(default=None)
    org: Optional[str] = Field(default=None)
    avatar: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None)


class CrateOwnershipRecord(BaseModel):
    """
    Maintainer relation between a crate and either a user or a team.
    Exactly one of `user_id` / `team_id` is set.
    """

    id: int
    crate_id: str
    user_id: Optional[int] = Field(default=None)
    team_id: Optional[int] = Field(default=None)


# ---------------------------------------------------------------------------
# Classification Models
# ---------------------------------------------------------------------------


class CategoryRecord(BaseModel):
    seq: int
    category: str = Field(description="Display name of the category.")
    slug: str
    description: str
    created_at: str

    @property
    def id(self) -> str:
        return self.slug


class KeywordRecord(BaseModel):
    seq: int
    keyword: str

    @property
    def id(self) -> str:
        return self.keyword


# ---------------------------------------------------------------------------
# API Request Models
# ---------------------------------------------------------------------------


class CrateListQuery(BaseModel):
    """
    Filters accepted by the crate listing endpoint.

    All filters are optional and combine with AND semantics. Filtering is
    always applied before pagination.
    """

    letter: Optional[str] = Field(
        default=None,
        description="Case-insensitive match on the first character of the crate name.",
    )
    q: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring match on the crate name.",
    )
    user_id: Optional[int] = Field(
        default=None,
        description="Only crates owned by this user.",
    )
    team_id: Optional[int] = Field(
        default=None,
        description="Only crates owned by this team.",
    )
    following: bool = Field(
        default=False,
        description="Only crates followed by the authenticated caller.",
    )
    sort: Optional[str] = Field(
        default=None,
        description="'alpha', 'downloads', or None for insertion order.",
    )

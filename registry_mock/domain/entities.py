from typing import Any, Dict, List, Optional
import logging

from registry_mock.domain.errors import CrateNotFound, LoginRequired, VersionNotFound
from registry_mock.domain.models import (
    CrateListQuery,
    CrateRecord,
    DependencyRecord,
    UserRecord,
    VersionRecord,
)
from registry_mock.domain.pagination import paginate
from registry_mock.domain.registry_utils import highest_version, match_text, unique
from registry_mock.domain.serializers import (
    serialize_category,
    serialize_dependency,
    serialize_keyword,
    serialize_team,
    serialize_user,
    serialize_version,
    serialize_version_download,
)
from registry_mock.storage.base import RecordStore

logger = logging.getLogger(__name__)

NO_VERSION = "0.0.0"


class Crate:
    def __init__(self, record: CrateRecord, registry: "Registry"):
        self.record = record
        self.registry = registry

    @property
    def crate_id(self) -> str:
        return self.record.name

    @property
    def versions(self) -> List[VersionRecord]:
        """All versions of this crate, in insertion order."""
        return [v for v in self.registry.store.all("version") if v.crate_id == self.crate_id]

    def get_version(self, num: str) -> VersionRecord:
        for version in self.versions:
            if version.num == num:
                return version
        raise VersionNotFound(self.crate_id, num)

    def to_dict(self) -> Dict[str, Any]:
        """
        Build the crate representation.

        `max_version`, `max_stable_version` and `newest_version` are derived
        from the live, non-yanked versions on every call.
        """
        crate = self.record
        versions = self.versions
        available = [v for v in versions if not v.yanked]
        nums = [v.num for v in available]

        newest_version = NO_VERSION
        if available:
            # max() keeps the first maximum, so scan newest-inserted first
            # to let later insertions win ties.
            newest_version = max(reversed(available), key=lambda v: v.created_at).num

        links_base = f"{self.registry.api_prefix}/crates/{crate.name}"
        return {
            "id": crate.name,
            "badges": list(crate.badges),
            "categories": list(crate.category_ids),
            "created_at": crate.created_at,
            "description": crate.description,
            "documentation": crate.documentation,
            "downloads": crate.downloads,
            "homepage": crate.homepage,
            "keywords": list(crate.keyword_ids),
            "links": {
                "owner_team": f"{links_base}/owner_team",
                "owner_user": f"{links_base}/owner_user",
                "reverse_dependencies": f"{links_base}/reverse_dependencies",
                "version_downloads": f"{links_base}/downloads",
                "versions": f"{links_base}/versions",
            },
            "max_version": highest_version(nums) or NO_VERSION,
            "max_stable_version": highest_version(nums, stable_only=True),
            "name": crate.name,
            "newest_version": newest_version,
            "repository": crate.repository,
            "updated_at": crate.updated_at,
            "versions": [v.id for v in versions],
        }


class Registry:
    """
    Read API over the fixture store.

    Every public method corresponds to one registry endpoint and returns
    the JSON payload for it, or raises a `RegistryError`.
    """

    def __init__(self, store: RecordStore, api_prefix: str = "/api/v1"):
        self.store = store
        self.api_prefix = api_prefix.rstrip("/")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_crate(self, crate_id: str) -> Crate:
        record = self.store.lookup("crate", crate_id)
        if record is None:
            logger.info(f"Unknown crate requested: {crate_id}")
            raise CrateNotFound(crate_id)
        return Crate(record, self)

    def get_all_crates(self) -> List[Crate]:
        return [Crate(record, self) for record in self.store.all("crate")]

    def _version_dict(self, version: VersionRecord) -> Dict[str, Any]:
        publisher = None
        if version.published_by_id is not None:
            publisher = self.store.lookup("user", version.published_by_id)
        return serialize_version(version, publisher, self.api_prefix)

    def _owned_crate_ids(self, user_id: Optional[int] = None, team_id: Optional[int] = None) -> set:
        owned = set()
        for ownership in self.store.all("crate_ownership"):
            if user_id is not None and ownership.user_id == user_id:
                owned.add(ownership.crate_id)
            if team_id is not None and ownership.team_id == team_id:
                owned.add(ownership.crate_id)
        return owned

    # ------------------------------------------------------------------
    # Crates
    # ------------------------------------------------------------------

    def list_crates(
        self,
        query: CrateListQuery,
        page: int,
        per_page: int,
        current_user: Optional[UserRecord] = None,
    ) -> Dict[str, Any]:
        followed = None
        if query.following:
            if current_user is None:
                raise LoginRequired()
            followed = set(current_user.followed_crate_ids)

        user_owned = self._owned_crate_ids(user_id=query.user_id) if query.user_id is not None else None
        team_owned = self._owned_crate_ids(team_id=query.team_id) if query.team_id is not None else None

        matches: List[Crate] = []
        for crate in self.get_all_crates():
            name = crate.crate_id
            if query.letter and not match_text(name, query.letter, "FirstLetter"):
                continue
            if query.q and not match_text(name, query.q, "Substring"):
                continue
            if user_owned is not None and name not in user_owned:
                continue
            if team_owned is not None and name not in team_owned:
                continue
            if followed is not None and name not in followed:
                continue
            matches.append(crate)

        if query.sort == "alpha":
            matches.sort(key=lambda c: c.crate_id.lower())
        elif query.sort == "downloads":
            matches.sort(key=lambda c: c.record.downloads, reverse=True)

        window, total = paginate(matches, page, per_page)
        return {
            "crates": [crate.to_dict() for crate in window],
            "meta": {"total": total},
        }

    def crate_detail(self, crate_id: str) -> Dict[str, Any]:
        crate = self.get_crate(crate_id)
        all_crates = self.store.all("crate")

        categories = []
        for slug in crate.record.category_ids:
            category = self.store.lookup("category", slug)
            if category is None:
                continue
            crates_cnt = sum(1 for c in all_crates if slug in c.category_ids)
            categories.append(serialize_category(category, crates_cnt))

        keywords = []
        for keyword_id in crate.record.keyword_ids:
            keyword = self.store.lookup("keyword", keyword_id)
            if keyword is None:
                continue
            crates_cnt = sum(1 for c in all_crates if keyword_id in c.keyword_ids)
            keywords.append(serialize_keyword(keyword, crates_cnt))

        return {
            "crate": crate.to_dict(),
            "categories": categories,
            "keywords": keywords,
            "versions": [self._version_dict(v) for v in crate.versions],
        }

    # ------------------------------------------------------------------
    # Following
    # ------------------------------------------------------------------

    def is_following(self, crate_id: str, current_user: Optional[UserRecord]) -> Dict[str, Any]:
        if current_user is None:
            raise LoginRequired()
        crate = self.get_crate(crate_id)
        return {"following": crate.crate_id in current_user.followed_crate_ids}

    def follow(self, crate_id: str, current_user: Optional[UserRecord]) -> Dict[str, Any]:
        if current_user is None:
            raise LoginRequired()
        crate = self.get_crate(crate_id)

        user = self.store.reload(current_user)
        if crate.crate_id not in user.followed_crate_ids:
            user.followed_crate_ids.append(crate.crate_id)
            self.store.update(user)
            logger.info(f"User {user.login} now follows {crate.crate_id}")
        return {"ok": True}

    def unfollow(self, crate_id: str, current_user: Optional[UserRecord]) -> Dict[str, Any]:
        if current_user is None:
            raise LoginRequired()
        crate = self.get_crate(crate_id)

        user = self.store.reload(current_user)
        if crate.crate_id in user.followed_crate_ids:
            user.followed_crate_ids = [c for c in user.followed_crate_ids if c != crate.crate_id]
            self.store.update(user)
            logger.info(f"User {user.login} no longer follows {crate.crate_id}")
        return {"ok": True}

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def list_versions(self, crate_id: str) -> Dict[str, Any]:
        crate = self.get_crate(crate_id)
        return {"versions": [self._version_dict(v) for v in crate.versions]}

    def version_authors(self, crate_id: str, num: str) -> Dict[str, Any]:
        version = self.get_crate(crate_id).get_version(num)
        return {
            "meta": {"names": list(version.authors)},
            "users": [],
        }

    def version_dependencies(self, crate_id: str, num: str) -> Dict[str, Any]:
        version = self.get_crate(crate_id).get_version(num)
        dependencies = [d for d in self.store.all("dependency") if d.version_id == version.id]
        return {"dependencies": [serialize_dependency(d) for d in dependencies]}

    def version_downloads(self, crate_id: str, num: str) -> Dict[str, Any]:
        version = self.get_crate(crate_id).get_version(num)
        downloads = [d for d in self.store.all("version_download") if d.version_id == version.id]
        return {"version_downloads": [serialize_version_download(d) for d in downloads]}

    # ------------------------------------------------------------------
    # Owners
    # ------------------------------------------------------------------

    def owner_users(self, crate_id: str) -> Dict[str, Any]:
        crate = self.get_crate(crate_id)
        users = []
        for ownership in self.store.all("crate_ownership"):
            if ownership.crate_id != crate.crate_id or ownership.user_id is None:
                continue
            user = self.store.lookup("user", ownership.user_id)
            if user is not None:
                users.append(serialize_user(user, kind="user"))
        return {"users": users}

    def owner_teams(self, crate_id: str) -> Dict[str, Any]:
        crate = self.get_crate(crate_id)
        teams = []
        for ownership in self.store.all("crate_ownership"):
            if ownership.crate_id != crate.crate_id or ownership.team_id is None:
                continue
            team = self.store.lookup("team", ownership.team_id)
            if team is not None:
                teams.append(serialize_team(team))
        return {"teams": teams}

    # ------------------------------------------------------------------
    # Dependents and downloads
    # ------------------------------------------------------------------

    def reverse_dependencies(self, crate_id: str, page: int, per_page: int) -> Dict[str, Any]:
        """
        Dependencies on this crate declared by other crates' versions.

        The `versions` array holds the versions declaring the dependencies
        of the current page, so both arrays cover the same window.
        """
        crate = self.get_crate(crate_id)
        dependents: List[DependencyRecord] = [
            d for d in self.store.all("dependency") if d.crate_id == crate.crate_id
        ]
        window, total = paginate(dependents, page, per_page)

        versions = []
        for version_id in unique(d.version_id for d in window):
            version = self.store.lookup("version", version_id)
            if version is not None:
                versions.append(self._version_dict(version))

        return {
            "dependencies": [serialize_dependency(d) for d in window],
            "versions": versions,
            "meta": {"total": total},
        }

    def crate_downloads(self, crate_id: str) -> Dict[str, Any]:
        crate = self.get_crate(crate_id)
        version_ids = {v.id for v in crate.versions}
        downloads = [d for d in self.store.all("version_download") if d.version_id in version_ids]
        return {
            "version_downloads": [serialize_version_download(d) for d in downloads],
            "meta": {"extra_downloads": []},
        }

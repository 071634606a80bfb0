from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from registry_mock.domain.errors import FixtureError
from registry_mock.storage.base import Override, RecordStore
from registry_mock.storage.factories import (
    FACTORIES,
    LIST_RELATION_ALIASES,
    RELATION_ALIASES,
    RecordFactory,
)

logger = logging.getLogger(__name__)

INTEGER_KEYED_KINDS = ("user", "team", "crate_ownership", "version_download")


def _record_id(value: Any) -> Any:
    # Accept either a record or a raw id for relation fields.
    if isinstance(value, BaseModel):
        return value.id
    return value


class FixtureStore(RecordStore):
    """
    In-memory store holding every registry record.

    Each kind has its own collection (insertion ordered) and its own
    sequence counter; the counter only moves forward, so ids are never
    reused. Records returned to callers are copies: changes made to them
    are not visible until written back with `update()`, and `reload()`
    returns the current stored state.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[Any, BaseModel]] = {kind: {} for kind in FACTORIES}
        self._sequences: Dict[str, int] = {kind: 0 for kind in FACTORIES}
        self._kinds_by_model = {factory.model: kind for kind, factory in FACTORIES.items()}

    # ------------------------------------------------------------------
    # RecordStore interface
    # ------------------------------------------------------------------

    def create(self, kind: str, /, **overrides: Override) -> BaseModel:
        factory = self._factory_for(kind)
        index = self._sequences[kind]

        attrs = self._resolve_overrides(kind, factory, index, overrides)
        values = factory.defaults(index, attrs)
        values.update(attrs)
        if factory.with_seq:
            values["seq"] = index + 1

        try:
            record = factory.model(**values)
        except ValidationError as e:
            raise FixtureError(f"Invalid {kind} attributes: {e}") from e

        self._check_references(kind, factory, record)
        self._check_constraints(kind, record)

        collection = self._collections[kind]
        if record.id in collection:
            raise FixtureError(f"A {kind} with id {record.id!r} already exists")

        collection[record.id] = record
        self._sequences[kind] = index + 1
        logger.debug(f"Created {kind} {record.id!r}")
        return record.model_copy(deep=True)

    def create_list(self, kind: str, count: int, /, **overrides: Override) -> List[BaseModel]:
        return [self.create(kind, **overrides) for _ in range(count)]

    def lookup(self, kind: str, record_id: Any) -> Optional[BaseModel]:
        collection = self._collections[self._kind_name(kind)]
        record = collection.get(record_id)
        if (
            record is None
            and kind in INTEGER_KEYED_KINDS
            and isinstance(record_id, str)
            and record_id.isdigit()
        ):
            # Integer ids are often passed in string form, e.g. from a query parameter.
            record = collection.get(int(record_id))
        if record is None:
            return None
        return record.model_copy(deep=True)

    def all(self, kind: str) -> List[BaseModel]:
        collection = self._collections[self._kind_name(kind)]
        return [record.model_copy(deep=True) for record in collection.values()]

    def reload(self, record: BaseModel) -> BaseModel:
        kind = self.kind_of(record)
        current = self.lookup(kind, record.id)
        if current is None:
            raise FixtureError(f"{kind} {record.id!r} is not stored")
        return current

    def update(self, record: BaseModel) -> None:
        kind = self.kind_of(record)
        collection = self._collections[kind]
        if record.id not in collection:
            raise FixtureError(f"{kind} {record.id!r} is not stored")
        factory = FACTORIES[kind]
        self._check_references(kind, factory, record)
        collection[record.id] = record.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def kind_of(self, record: BaseModel) -> str:
        try:
            return self._kinds_by_model[type(record)]
        except KeyError:
            raise FixtureError(f"{type(record).__name__} is not a registry record") from None

    def exists(self, kind: str, record_id: Any) -> bool:
        return record_id in self._collections[kind]

    def _kind_name(self, kind: str) -> str:
        if kind not in self._collections:
            raise FixtureError(f"Unknown record kind: {kind!r}")
        return kind

    def _factory_for(self, kind: str) -> RecordFactory:
        return FACTORIES[self._kind_name(kind)]

    def _resolve_overrides(
        self,
        kind: str,
        factory: RecordFactory,
        index: int,
        overrides: Dict[str, Override],
    ) -> Dict[str, Any]:
        """
        Evaluate callable overrides for this index and translate relation
        shorthands (`crate=...`, `followed_crates=[...]`) into id fields.
        """
        attrs: Dict[str, Any] = {}
        for key, value in overrides.items():
            if callable(value):
                value = value(index)

            if key in RELATION_ALIASES:
                key = RELATION_ALIASES[key]
                value = _record_id(value)
            elif key in LIST_RELATION_ALIASES:
                key = LIST_RELATION_ALIASES[key]
                value = [_record_id(v) for v in value]

            if key not in factory.model.model_fields or key == "seq":
                raise FixtureError(f"Unknown {kind} attribute: {key!r}")
            attrs[key] = value
        return attrs

    def _check_references(self, kind: str, factory: RecordFactory, record: BaseModel) -> None:
        for field_name, target_kind in factory.references.items():
            target_id = getattr(record, field_name)
            if target_id is not None and not self.exists(target_kind, target_id):
                raise FixtureError(
                    f"{kind} {record.id!r} references unknown {target_kind} {target_id!r}"
                )
        for field_name, target_kind in factory.list_references.items():
            for target_id in getattr(record, field_name):
                if not self.exists(target_kind, target_id):
                    raise FixtureError(
                        f"{kind} {record.id!r} references unknown {target_kind} {target_id!r}"
                    )

    def _check_constraints(self, kind: str, record: BaseModel) -> None:
        if kind == "crate_ownership":
            if (record.user_id is None) == (record.team_id is None):
                raise FixtureError("A crate ownership needs exactly one of user or team")

        if kind == "version_download":
            for existing in self._collections[kind].values():
                if existing.version_id == record.version_id and existing.date == record.date:
                    raise FixtureError(
                        f"Version {record.version_id!r} already has downloads for {record.date}"
                    )

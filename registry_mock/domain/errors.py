"""
Domain errors raised by the store and the query layer.

The API layer maps every `RegistryError` onto the registry's uniform
`{"errors": [{"detail": ...}]}` envelope; see `registry_mock.main`.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for errors that end a request with an error envelope."""

    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class CrateNotFound(RegistryError):
    status_code = 404

    def __init__(self, crate_id: str):
        super().__init__("Not Found")
        self.crate_id = crate_id


class BadRequest(RegistryError):
    status_code = 400


class LoginRequired(RegistryError):
    status_code = 403

    def __init__(self):
        super().__init__("must be logged in to perform that action")


class VersionNotFound(RegistryError):
    """
    Unknown version number on a known crate.

    The production registry answers this with HTTP 200 and an error body
    instead of a 404, and clients depend on that, so we do the same.
    """

    status_code = 200

    def __init__(self, crate_id: str, num: str):
        super().__init__(f"crate `{crate_id}` does not have a version `{num}`")
        self.crate_id = crate_id
        self.num = num


class FixtureError(Exception):
    """
    Misuse of the fixture store (unknown kind, missing parent record,
    duplicate key). Never surfaced through the HTTP API.
    """

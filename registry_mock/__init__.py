"""
In-memory mock of the crates.io registry API.

Used by frontend tests to exercise HTTP-level contracts (pagination,
filtering, ownership, following) without a real registry backend.
"""

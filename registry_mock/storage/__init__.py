"""
Record storage for the mock registry.

This package is responsible for:
* Holding every record kind in insertion order with sequential ids.
* Applying deterministic per-index fixture defaults on creation.
* Checking that relations point at existing records.
* Loading seed records from a JSON file.
"""

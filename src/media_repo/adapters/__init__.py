"""
Adapter layer for the media repository.

Contains the storage abstraction (local/S3) the HTTP handlers depend on.
"""

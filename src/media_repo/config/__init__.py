"""
Configuration management for the media repository.

Contains the Pydantic settings object shared by the app factory, the CLI and
the storage backend factory.
"""

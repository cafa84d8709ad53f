"""Blob storage upload of completed result files."""

from .blob import BlobUploader

__all__ = ["BlobUploader"]

"""Adapters for the external document and blob stores."""

from .base import BlobHandle, BlobStore, Document, DocumentStore
from .blobs import ImageHostBlobStore, LocalBlobStore, get_blob_store
from .sql import SqlDocumentStore
from .subscription import Subscription

__all__ = [
    "BlobHandle",
    "BlobStore",
    "Document",
    "DocumentStore",
    "ImageHostBlobStore",
    "LocalBlobStore",
    "SqlDocumentStore",
    "Subscription",
    "get_blob_store",
]

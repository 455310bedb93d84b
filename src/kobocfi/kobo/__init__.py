"""Kobo reader database access and annotation export."""

from .annotations import ExportResult, VolumeResolver, build_annotation, export_annotations, load_volume_map
from .bookmarks import BookmarkDatabaseError, BookmarkRepository, BookmarkRow

__all__ = [
    "BookmarkDatabaseError",
    "BookmarkRepository",
    "BookmarkRow",
    "ExportResult",
    "VolumeResolver",
    "build_annotation",
    "export_annotations",
    "load_volume_map",
]

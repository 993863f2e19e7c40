"""Photos data model shared by photo exporters and importers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class PhotoAlbum:
    album_id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class PhotoModel:
    title: str
    fetchable_url: str
    data_id: str
    album_id: Optional[str] = None
    description: Optional[str] = None
    media_type: Optional[str] = None
    taken_at: Optional[str] = None
    resolution: Optional[Tuple[int, int]] = None


@dataclass
class PhotosContainerResource:
    albums: List[PhotoAlbum] = field(default_factory=list)
    photos: List[PhotoModel] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.albums and not self.photos

"""Photos adapter pair backed by a local directory tree.

Every directory below the root is an album; nested directories are child
albums discovered while exporting their parent. Images directly inside the
root belong to a pseudo-album with id ``"."``.

Root requests page through top-level albums with ``album:<offset>`` tokens.
Album requests page through that album's images with ``photo:<offset>``
tokens. A token is only accepted by the request type that produced it.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Optional

from ..config import ConfigManager
from ..core.idempotent import IdempotentImportCache, ImportStepError
from ..models import (
    AuthData,
    ContinuationRecord,
    ExportOutcome,
    ExportRequest,
    ImportOutcome,
    PaginationToken,
    PhotoAlbum,
    PhotoModel,
    PhotosContainerResource,
    ResourceNode,
)
from ..utils import file_ops, image_utils
from ..utils.cancel import CancellationToken
from ..utils.logger import get_logger

SERVICE_NAME = "local"
DATA_TYPE = "photos"
ALBUM_TOKEN_PREFIX = "album:"
PHOTO_TOKEN_PREFIX = "photo:"
ROOT_ALBUM_ID = "."
RESOURCE_TYPE = "album"


class InvalidPaginationTokenError(ValueError):
    pass


def album_cache_key(album_id: str) -> str:
    return f"album:{album_id}"


def photo_cache_key(data_id: str) -> str:
    return f"photo:{data_id}"


def _parse_offset(token: Optional[PaginationToken], prefix: str) -> int:
    if token is None:
        return 0
    value = token.token
    if not value.startswith(prefix):
        raise InvalidPaginationTokenError(f"Invalid pagination token {value}")
    try:
        offset = int(value[len(prefix):])
    except ValueError:
        raise InvalidPaginationTokenError(f"Invalid pagination token {value}") from None
    if offset < 0:
        raise InvalidPaginationTokenError(f"Invalid pagination token {value}")
    return offset


def _is_visible(path: Path) -> bool:
    return not path.name.startswith(".") and not path.is_symlink()


class LocalPhotosExporter:
    def __init__(self, root: Path, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.root = root
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.album_page_size = int(self.config.get("local_photos.album_page_size", 20))
        self.photo_page_size = int(self.config.get("local_photos.photo_page_size", 50))
        self.image_extensions = {
            str(ext).lower() for ext in self.config.get("local_photos.image_extensions", [".jpg", ".png"])
        }

    def export(self, job_id: str, credential: AuthData, request: ExportRequest) -> ExportOutcome:
        if not self.root.is_dir():
            return ExportOutcome.error(f"fatal: source root does not exist: {self.root}")

        try:
            if request.resource is not None:
                return self._export_photos(request.resource, request.token)
            return self._export_albums(request.token)
        except InvalidPaginationTokenError as exc:
            return ExportOutcome.error(f"fatal: {exc}")

    def _export_albums(self, token: Optional[PaginationToken]) -> ExportOutcome:
        offset = _parse_offset(token, ALBUM_TOKEN_PREFIX)

        entries: list[tuple[str, str]] = []
        if self._list_images(self.root):
            entries.append((ROOT_ALBUM_ID, self.root.name or ROOT_ALBUM_ID))
        for directory in self._list_albums(self.root):
            entries.append((directory.name, directory.name))

        page = entries[offset:offset + self.album_page_size]
        next_offset = offset + len(page)
        next_token = (
            PaginationToken(f"{ALBUM_TOKEN_PREFIX}{next_offset}") if next_offset < len(entries) else None
        )

        albums = [PhotoAlbum(album_id=album_id, name=name) for album_id, name in page]
        children = [
            ResourceNode(resource_id=album.album_id, resource_type=RESOURCE_TYPE, name=album.name)
            for album in albums
        ]
        self.logger.debug("Exported %s albums from offset %s", len(albums), offset)

        resource = PhotosContainerResource(albums=albums)
        continuation = ContinuationRecord(next_token=next_token, children=tuple(children))
        if next_token is None:
            return ExportOutcome.ended(resource, continuation)
        return ExportOutcome.continuing(resource, continuation)

    def _export_photos(self, resource: ResourceNode, token: Optional[PaginationToken]) -> ExportOutcome:
        offset = _parse_offset(token, PHOTO_TOKEN_PREFIX)
        album_dir = self._album_dir(resource.resource_id)
        if not album_dir.is_dir():
            return ExportOutcome.error(f"fatal: album directory not found: {album_dir}")

        images = self._list_images(album_dir)
        page = images[offset:offset + self.photo_page_size]
        next_offset = offset + len(page)
        next_token = (
            PaginationToken(f"{PHOTO_TOKEN_PREFIX}{next_offset}") if next_offset < len(images) else None
        )

        photos = [self._build_photo(resource.resource_id, path) for path in page]

        # Sub-albums are announced once, on the album's first page.
        albums: list[PhotoAlbum] = []
        children: list[ResourceNode] = []
        if token is None and resource.resource_id != ROOT_ALBUM_ID:
            for directory in self._list_albums(album_dir):
                album_id = str(PurePosixPath(resource.resource_id) / directory.name)
                albums.append(PhotoAlbum(album_id=album_id, name=directory.name))
                children.append(
                    ResourceNode(resource_id=album_id, resource_type=RESOURCE_TYPE, name=directory.name)
                )

        payload = PhotosContainerResource(albums=albums, photos=photos)
        continuation = ContinuationRecord(next_token=next_token, children=tuple(children))
        if next_token is None:
            return ExportOutcome.ended(payload, continuation)
        return ExportOutcome.continuing(payload, continuation)

    def _build_photo(self, album_id: str, path: Path) -> PhotoModel:
        exif_time = image_utils.get_exif_datetime_original(path, self.logger)
        return PhotoModel(
            title=path.name,
            fetchable_url=str(path),
            data_id=str(PurePosixPath(album_id) / path.name),
            album_id=album_id,
            media_type=image_utils.get_media_type(path, self.logger),
            taken_at=image_utils.format_exif_time(exif_time) if exif_time else None,
            resolution=image_utils.get_image_resolution(path, self.logger),
        )

    def _album_dir(self, album_id: str) -> Path:
        if album_id == ROOT_ALBUM_ID:
            return self.root
        return self.root.joinpath(*PurePosixPath(album_id).parts)

    def _list_albums(self, directory: Path) -> list[Path]:
        return sorted(
            (path for path in directory.iterdir() if path.is_dir() and _is_visible(path)),
            key=lambda path: path.name,
        )

    def _list_images(self, directory: Path) -> list[Path]:
        return sorted(
            (
                path
                for path in directory.iterdir()
                if path.is_file() and _is_visible(path) and path.suffix.lower() in self.image_extensions
            ),
            key=lambda path: path.name,
        )


class LocalPhotosImporter:
    """Writes albums as directories and photos as file copies under ``root``.

    Albums are created fail-fast because their photos depend on them; photos are
    best-effort, so one unreadable file does not stop the rest of the page.
    """

    def __init__(
        self,
        root: Path,
        config: Optional[ConfigManager] = None,
        logger=None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        self.root = root
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.cancel_token = cancel_token

    def import_item(
        self,
        job_id: str,
        cache: IdempotentImportCache,
        credential: AuthData,
        payload: Any,
    ) -> ImportOutcome:
        if payload is None:
            return ImportOutcome.ok()
        if not isinstance(payload, PhotosContainerResource):
            return ImportOutcome.error(f"Unsupported payload: {type(payload).__name__}")
        if payload.is_empty():
            return ImportOutcome.ok()

        try:
            for album in payload.albums:
                cache.run_once(
                    album_cache_key(album.album_id),
                    lambda album=album: str(self._create_album(cache, album)),
                    description=f"Creating album {album.name}",
                )
        except ImportStepError as exc:
            return ImportOutcome.error(str(exc))

        for photo in payload.photos:
            cache.run_once_and_swallow(
                photo_cache_key(photo.data_id),
                lambda photo=photo: str(self._import_photo(cache, photo)),
                description=photo.title,
            )
        return ImportOutcome.ok()

    def _create_album(self, cache: IdempotentImportCache, album: PhotoAlbum) -> Path:
        if album.album_id == ROOT_ALBUM_ID:
            target = self.root
        else:
            album_path = PurePosixPath(album.album_id)
            parent_id = str(album_path.parent)
            if parent_id == ".":
                parent_dir = str(self.root)
            else:
                parent_dir = cache.lookup(album_cache_key(parent_id))
                if parent_dir is None:
                    raise LookupError(f"Parent album {parent_id} has not been imported")
            target = Path(parent_dir) / album_path.name
        result = file_ops.safe_makedirs(target, config=self.config, logger=self.logger)
        if not result.success:
            raise OSError(result.error_message)
        return target

    def _import_photo(self, cache: IdempotentImportCache, photo: PhotoModel) -> Path:
        album_dir = cache.lookup(album_cache_key(photo.album_id or ROOT_ALBUM_ID))
        if album_dir is None:
            raise LookupError(f"Album {photo.album_id} has not been imported")
        return file_ops.copy_into(
            Path(photo.fetchable_url),
            Path(album_dir),
            config=self.config,
            cancel_token=self.cancel_token,
            logger=self.logger,
        )


def register(registry) -> None:
    registry.register(
        SERVICE_NAME,
        DATA_TYPE,
        exporter=lambda config, options: LocalPhotosExporter(Path(options["root"]), config),
        importer=lambda config, options: LocalPhotosImporter(
            Path(options["root"]), config, cancel_token=options.get("cancel_token")
        ),
    )

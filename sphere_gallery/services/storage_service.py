"""
Local disk storage for uploaded gallery images.
Allocates collision-free filenames, writes uploads and lists the stored files.
"""
import json
import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

# Upper bound of the random suffix added after the timestamp
RANDOM_SUFFIX_MAX = 10 ** 9
# How many fresh names to try before giving up on an upload
MAX_ALLOCATION_ATTEMPTS = 5
DEFAULT_ORIGINAL_NAME = "upload"


class StorageError(Exception):
    """Raised when an upload cannot be written to the storage directory."""


@dataclass(frozen=True)
class StoredImage:
    """A file in the storage directory and the public URL it is served under."""
    id: str
    url: str


class ImageStore:
    """
    Filesystem-backed image store.

    Files are named ``{timestamp_ms}-{random_int}-{original_name}`` and are
    created exclusively, so two uploads that draw the same name never
    overwrite each other: the loser draws again.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        url_prefix: str = "/images",
        rng: Optional[random.Random] = None,
        clock=time.time,
    ):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self._rng = rng or random.Random()
        self._clock = clock

    def ensure_directory(self) -> None:
        """Create the storage directory if it does not exist yet."""
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created image storage directory: {self.directory}")

    def public_url(self, filename: str) -> str:
        """
        Derive the public URL of a stored file.

        Args:
            filename: Name of the file inside the storage directory

        Returns:
            str: URL under the images prefix (e.g. "/images/1700000000000-42-cat.png")
        """
        return f"{self.url_prefix}/{quote(filename)}"

    def generate_filename(self, original_name: Optional[str]) -> str:
        """
        Build a storage filename from the client-supplied name.

        Only the last path component of the original name is kept so that an
        upload can never escape the storage directory.

        Args:
            original_name: Filename sent by the client (may be None or empty)

        Returns:
            str: "{timestamp_ms}-{random_int}-{name}"
        """
        name = Path(original_name or "").name.strip() or DEFAULT_ORIGINAL_NAME
        timestamp = int(self._clock() * 1000)
        suffix = self._rng.randint(0, RANDOM_SUFFIX_MAX)
        return f"{timestamp}-{suffix}-{name}"

    def save(self, original_name: Optional[str], data: bytes) -> StoredImage:
        """
        Write an upload to a freshly allocated filename.

        Args:
            original_name: Filename sent by the client
            data: Raw file bytes

        Returns:
            StoredImage: id (filename) and public URL of the new file

        Raises:
            StorageError: If no unused filename was found or the write failed
        """
        self.ensure_directory()

        for attempt in range(MAX_ALLOCATION_ATTEMPTS):
            filename = self.generate_filename(original_name)
            path = self.directory / filename
            try:
                # "xb" fails if the file already exists instead of truncating it
                with open(path, "xb") as f:
                    f.write(data)
            except FileExistsError:
                logger.warning(
                    f"Filename collision on {filename} "
                    f"(attempt {attempt + 1}/{MAX_ALLOCATION_ATTEMPTS}), drawing a new name"
                )
                continue
            except OSError as e:
                logger.error(f"Failed to write upload {filename}: {str(e)}", exc_info=True)
                raise StorageError(f"Failed to write {filename}: {e}") from e

            logger.info(f"Stored upload {filename} ({len(data):,} bytes)")
            return StoredImage(id=filename, url=self.public_url(filename))

        raise StorageError(
            f"Could not allocate a unique filename after {MAX_ALLOCATION_ATTEMPTS} attempts"
        )

    def list_images(self) -> List[StoredImage]:
        """
        List every entry of the storage directory.

        No filtering, sorting or pagination: the order is whatever the
        directory read returns.

        Returns:
            List[StoredImage]: One record per directory entry

        Raises:
            OSError: If the directory cannot be read
        """
        return [
            StoredImage(id=filename, url=self.public_url(filename))
            for filename in os.listdir(self.directory)
        ]

    def write_manifest(self, output: Union[str, Path]) -> int:
        """
        Write a static images.json snapshot of the current listing.

        Args:
            output: Destination path of the manifest file

        Returns:
            int: Number of records written
        """
        records = [{"url": image.url} for image in self.list_images()]
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(records, indent=2), encoding="utf-8")
        logger.info(f"Wrote manifest with {len(records)} image(s) to {output}")
        return len(records)

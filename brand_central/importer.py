# importer.py
import logging
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

import requests

from .exceptions import DownloadError
from .storage.base import FileImporter, FileVersion, Filesystem, VolatileDirectory
from .storage.dto import GetFilePayload
from .storage.local import TemporaryVolatileDirectory

DEFAULT_FILENAME = "download"


def safe_filename(filename: str) -> str:
    """Strips any directory components from a remote file name."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    if name in ("", ".", ".."):
        return DEFAULT_FILENAME
    return name


def download_file(
    url: str, local_path: Path, session: Optional[requests.Session] = None, timeout: float = 30.0
):
    """
    Downloads a file with a plain, unauthenticated GET and writes it to local_path.
    Raises DownloadError for any status other than 200.
    """
    http = session or requests
    logging.info(f"Downloading {url} to {local_path}...")
    response = http.get(url, timeout=timeout)

    if response.status_code != 200:
        logging.error(f"Download of {url} failed with status {response.status_code}.")
        raise DownloadError(
            f'There was an error downloading "{url}": {response.reason} ({response.status_code})',
            status_code=response.status_code,
        )

    with open(local_path, "wb") as f:
        f.write(response.content)


def import_remote_file(
    payload: GetFilePayload,
    destination_folder_id: str,
    file_importer: FileImporter,
    filesystem: Filesystem,
    attribute_key: str,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    volatile_directory_factory: Callable[[], VolatileDirectory] = TemporaryVolatileDirectory,
) -> FileVersion:
    """
    Full import cycle for a single remote file: download to a scoped temporary
    directory, hand it to the host importer, move it to the destination folder
    and tag it with the source asset id.
    There is no rollback; host errors propagate after the temporary files are removed.
    """
    with volatile_directory_factory() as volatile_directory:
        local_path = volatile_directory.path / safe_filename(payload.original_file_name)

        # 1. Download
        download_file(payload.download_url, local_path, session=session, timeout=timeout)

        # 2. Import into the host's file store
        file_version = file_importer.import_local_file(local_path)
        file = file_version.get_file()

        # 3. Move the file to the selected destination folder
        destination_folder = filesystem.get_folder(destination_folder_id)
        file.set_file_folder(destination_folder)
        file.get_file_node().move(destination_folder)

        # 4. Remember where the file came from
        file.set_attribute(attribute_key, payload.asset_id)

    logging.info(
        f"Imported {payload.original_file_name} (asset {payload.asset_id}) into folder '{destination_folder_id}'."
    )
    return file_version

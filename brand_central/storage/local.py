# storage/local.py
import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from .base import FileImporter, FileNode, FileVersion, Filesystem, Folder, HostFile, VolatileDirectory

ROOT_FOLDER_ID = "root"
ATTRIBUTES_SUFFIX = ".attributes.json"


class TemporaryVolatileDirectory(VolatileDirectory):
    """A volatile directory backed by tempfile.mkdtemp()."""

    def __init__(self, prefix: str = "brand_central_"):
        self._path = Path(tempfile.mkdtemp(prefix=prefix))

    @property
    def path(self) -> Path:
        return self._path

    def cleanup(self):
        if self._path.exists():
            logging.info(f"Removing volatile directory {self._path}")
            shutil.rmtree(self._path, ignore_errors=True)


class LocalFolder(Folder):
    def __init__(self, folder_id: str, path: Path):
        self._folder_id = folder_id
        self.path = path

    @property
    def folder_id(self) -> str:
        return self._folder_id


class LocalFileNode(FileNode):
    def __init__(self, file: "LocalFile"):
        self.file = file

    def move(self, folder: Folder):
        """Moves the file and its attribute sidecar on disk."""
        if not isinstance(folder, LocalFolder):
            raise TypeError("LocalFileNode can only be moved to a LocalFolder.")
        source = self.file.path
        if source.parent == folder.path:
            return
        target = _unique_path(folder.path / source.name)
        logging.info(f"Moving {source} to {target}...")
        shutil.move(str(source), str(target))
        old_sidecar = self.file.attributes_path
        self.file.path = target
        if old_sidecar.exists():
            shutil.move(str(old_sidecar), str(self.file.attributes_path))


class LocalFile(HostFile):
    """A file stored below the LocalFileStore root with JSON attributes next to it."""

    def __init__(self, path: Path, folder: LocalFolder):
        self.path = path
        self.folder = folder
        self.attributes: Dict[str, Any] = {}

    @property
    def attributes_path(self) -> Path:
        return self.path.with_name(self.path.name + ATTRIBUTES_SUFFIX)

    def set_file_folder(self, folder: Folder):
        self.folder = folder

    def get_file_node(self) -> LocalFileNode:
        return LocalFileNode(self)

    def set_attribute(self, key: str, value: Any):
        self.attributes[key] = value
        self.attributes_path.write_text(
            json.dumps(self.attributes, indent=2), encoding="utf-8"
        )


class LocalFileVersion(FileVersion):
    def __init__(self, file: LocalFile):
        self.file = file

    def get_file(self) -> LocalFile:
        return self.file


class LocalFileStore(FileImporter, Filesystem):
    """
    Minimal on-disk host used by the command line.
    Folders are directories below `<root>/files`, the root folder id is "root".
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.files_dir = self.root / "files"
        self.files_dir.mkdir(parents=True, exist_ok=True)

    def get_folder(self, folder_id: Optional[str]) -> LocalFolder:
        folder_id = str(folder_id) if folder_id else ROOT_FOLDER_ID
        if "/" in folder_id or "\\" in folder_id or folder_id in (".", ".."):
            raise ValueError(f"Invalid folder id: '{folder_id}'")
        path = self.files_dir / folder_id
        path.mkdir(parents=True, exist_ok=True)
        return LocalFolder(folder_id, path)

    def import_local_file(self, local_path: Path) -> LocalFileVersion:
        local_path = Path(local_path)
        if not local_path.is_file():
            raise FileNotFoundError(f"File not found: {local_path}")

        folder = self.get_folder(ROOT_FOLDER_ID)
        target = _unique_path(folder.path / local_path.name)
        logging.info(f"Importing {local_path} as {target}...")
        shutil.copyfile(local_path, target)
        return LocalFileVersion(LocalFile(target, folder))


def _unique_path(path: Path) -> Path:
    """Appends a counter to the file stem until the path is unused."""
    candidate = path
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        counter += 1
    return candidate

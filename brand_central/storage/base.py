# storage/base.py
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class Folder(ABC):
    """A folder in the host's file manager."""

    @property
    @abstractmethod
    def folder_id(self) -> str:
        pass


class FileNode(ABC):
    """The node representing a file in the host's file tree."""

    @abstractmethod
    def move(self, folder: Folder):
        """
        Moves the node below another folder of the tree.

        :param folder: The destination folder.
        """
        pass


class HostFile(ABC):
    """
    A file record managed by the host application.
    Keeping the logical folder and the tree node in sync is the caller's job.
    """

    @abstractmethod
    def set_file_folder(self, folder: Folder):
        """
        Sets the folder the file logically belongs to.

        :param folder: The destination folder.
        """
        pass

    @abstractmethod
    def get_file_node(self) -> FileNode:
        """Returns the file tree node of this file."""
        pass

    @abstractmethod
    def set_attribute(self, key: str, value: Any):
        """
        Stores a custom attribute on the file.

        :param key: The attribute handle.
        :param value: The attribute value.
        """
        pass


class FileVersion(ABC):
    """A version of a file produced by an import."""

    @abstractmethod
    def get_file(self) -> HostFile:
        pass


class FileImporter(ABC):
    @abstractmethod
    def import_local_file(self, local_path: Path) -> FileVersion:
        """
        Ingests a file from the local filesystem into the host's file store.

        :param local_path: Path of the file to import. It is deleted by the caller afterwards.
        :return: The file version that was created.
        """
        pass


class Filesystem(ABC):
    @abstractmethod
    def get_folder(self, folder_id: str) -> Folder:
        """
        Looks up a folder by its ID.
        Raises an error if the folder does not exist or is inaccessible.

        :param folder_id: The ID of the folder.
        """
        pass


class VolatileDirectory(ABC):
    """
    Scoped temporary storage. Used as a context manager, the directory is
    removed on exit whether or not the body raised.
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        pass

    @abstractmethod
    def cleanup(self):
        pass

    def __enter__(self) -> "VolatileDirectory":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False

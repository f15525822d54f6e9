# provider.py
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .auth import ClientCredentialsTokenProvider, TokenProvider
from .config import ProviderConfiguration, Settings, get_settings, validate_form
from .exceptions import ConfigurationError, MalformedResponseError
from .gateway import ApiGateway
from .importer import import_remote_file
from .storage.base import FileImporter, FileVersion, Filesystem
from .storage.dto import (
    AssetDetails,
    AssetPayload,
    ExternalFileEntry,
    ExternalFileList,
    ExternalSearchRequest,
    FileTypePayload,
    GetFilePayload,
    SearchPagePayload,
    decode,
)

ASSET_PATH = "/public_api/v1/assets/{asset_id}"
SEARCH_PATH = "/public_api/v1/assets/search"
GET_FILE_PATH = "/public_api/v1/assets/get_file/{file_id}"
FILE_TYPES_PATH = "/public_api/v1/file_types"


class BrandCentralProvider:
    """
    External file provider for Brand Central.
    Implements the host's file-provider interface on top of the public API.
    """

    def __init__(
        self,
        configuration: Optional[ProviderConfiguration] = None,
        file_importer: Optional[FileImporter] = None,
        filesystem: Optional[Filesystem] = None,
        token_provider: Optional[TokenProvider] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.token_provider = token_provider or ClientCredentialsTokenProvider(
            session=self.session,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            expiry_leeway=self.settings.TOKEN_EXPIRY_LEEWAY_SECONDS,
        )
        self.file_importer = file_importer
        self.filesystem = filesystem
        self.configuration = configuration or ProviderConfiguration()
        self.gateway = self._build_gateway()

    def _build_gateway(self) -> ApiGateway:
        return ApiGateway(
            self.configuration,
            self.token_provider,
            session=self.session,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
        )

    # --- Configuration ---

    def load_from_request(self, form: Mapping[str, Any]):
        """
        Replaces the configuration with the values of the settings form.
        Does not validate; call validate_request() first.
        """
        self.configuration = ProviderConfiguration.from_form(form)
        self.token_provider.invalidate()
        self.gateway = self._build_gateway()

    def validate_request(self, form: Mapping[str, Any]) -> List[str]:
        return validate_form(form)

    @property
    def is_configured(self) -> bool:
        return self.configuration.is_configured

    # --- Browsing ---

    def get_asset_details(self, asset_id) -> AssetDetails:
        """
        Fetches title, description, thumbnail and files of an asset.
        Returns empty details when the provider returned no data.
        """
        result = self.gateway.do_request(ASSET_PATH.format(asset_id=asset_id))

        asset_details = AssetDetails()
        if not result.ok or result.data is None:
            return asset_details

        payload = decode(AssetPayload, result.data)
        asset_details.title = payload.name
        asset_details.description = payload.desc
        asset_details.thumbnail_url = payload.thumbnail

        if payload.files is not None:
            # Later entries with the same id win
            asset_details.files = {file.id: file.filename for file in payload.files}

        return asset_details

    def search_files(self, search_request: ExternalSearchRequest) -> ExternalFileList:
        external_file_list = ExternalFileList()

        result = self.gateway.do_request(SEARCH_PATH, search_request.to_query_params())
        if not result.ok:
            return external_file_list

        data = result.data
        if not isinstance(data, dict) or not isinstance(data.get("assets"), list):
            logging.warning("Search response has no list of assets, returning no results.")
            return external_file_list

        page = decode(SearchPagePayload, data)
        for asset in page.assets:
            external_file_list.add_file(
                ExternalFileEntry(
                    id=asset.id,
                    thumbnail_url=asset.thumbnail,
                    title=asset.name,
                )
            )

        external_file_list.total_files = (
            page.total if page.total is not None else len(external_file_list.files)
        )
        return external_file_list

    def support_file_types(self) -> bool:
        return True

    def get_file_types(self) -> Dict[str, Optional[str]]:
        result = self.gateway.do_request(FILE_TYPES_PATH)

        file_types = {}
        if not result.ok or not isinstance(result.data, list):
            return file_types

        for item in result.data:
            try:
                file_type = decode(FileTypePayload, item)
            except MalformedResponseError as e:
                logging.warning(f"Skipping file type entry {item!r}: {e}")
                continue
            file_types[file_type.key] = file_type.value

        return file_types

    def has_custom_import_handler(self) -> bool:
        """The host shows a custom asset picker instead of its generic file browser."""
        return True

    # --- Import ---

    def import_file(self, file_id, destination_folder_id) -> Optional[FileVersion]:
        """
        Imports a single asset file into the host's file manager.

        :param file_id: The Brand Central file id.
        :param destination_folder_id: The host folder the file is moved to.
        :return: The new file version, or None if the provider returned no data.
        """
        result = self.gateway.do_request(GET_FILE_PATH.format(file_id=file_id))
        if not result.ok or result.data is None:
            return None

        if self.file_importer is None or self.filesystem is None:
            raise ConfigurationError(
                "A file importer and a filesystem are required to import files."
            )

        payload = decode(GetFilePayload, result.data)
        return import_remote_file(
            payload,
            destination_folder_id,
            file_importer=self.file_importer,
            filesystem=self.filesystem,
            attribute_key=self.settings.ASSET_ID_ATTRIBUTE,
            session=self.session,
            timeout=self.settings.HTTP_TIMEOUT_SECONDS,
        )

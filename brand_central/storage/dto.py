# storage/dto.py
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from ..exceptions import MalformedResponseError

# Brand Central ids are numeric, but string ids are passed through unchanged
RemoteId = Union[int, str]

ModelT = TypeVar("ModelT", bound=BaseModel)


# --- Remote response schemas ---


class _RemoteModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AssetFilePayload(_RemoteModel):
    id: RemoteId
    filename: str


class AssetPayload(_RemoteModel):
    """Body of GET /public_api/v1/assets/{id}."""

    name: Optional[str] = None
    desc: Optional[str] = None
    thumbnail: Optional[str] = None
    files: Optional[List[AssetFilePayload]] = None

    @field_validator("files", mode="before")
    @classmethod
    def ignore_non_list_files(cls, value: Any) -> Any:
        return value if isinstance(value, list) else None


class SearchAssetPayload(_RemoteModel):
    id: RemoteId
    thumbnail: Optional[str] = None
    name: Optional[str] = None


class SearchPagePayload(_RemoteModel):
    """Body of GET /public_api/v1/assets/search."""

    assets: List[SearchAssetPayload]
    total: Optional[int] = None


class FileTypePayload(_RemoteModel):
    key: str
    value: Optional[str] = None

    @field_validator("key", "value", mode="before")
    @classmethod
    def stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class GetFilePayload(_RemoteModel):
    """Body of GET /public_api/v1/assets/get_file/{id}."""

    download_url: str = Field(alias="downloadUrl")
    original_file_name: str = Field(alias="originalFileName")
    asset_id: RemoteId = Field(alias="assetId")


def decode(model: Type[ModelT], data: Any) -> ModelT:
    """
    Validates raw JSON against a response schema.
    Raises MalformedResponseError when the shape does not match.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Unexpected {model.__name__} response: {e.error_count()} validation error(s). {e.errors()[0]['msg']}"
        ) from e


# --- Host-facing Data Transfer Objects ---


class AssetDetails(BaseModel):
    """
    Title, description, thumbnail and downloadable files of a single asset.
    All fields are empty when the provider could not return any data.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    files: Dict[RemoteId, str] = Field(default_factory=dict)


class ExternalFileEntry(BaseModel):
    """One row of a search result."""

    id: RemoteId
    thumbnail_url: Optional[str] = None
    title: Optional[str] = None


class ExternalFileList(BaseModel):
    """A page of search results. total_files counts all matches, not just this page."""

    files: List[ExternalFileEntry] = Field(default_factory=list)
    total_files: int = 0

    def add_file(self, entry: ExternalFileEntry):
        self.files.append(entry)


class ExternalSearchRequest(BaseModel):
    """Search criteria supplied by the host's file picker."""

    search_term: Optional[str] = None
    file_type: Optional[str] = None
    order_by: Optional[str] = None
    order_by_direction: Optional[str] = None
    current_page: Optional[int] = None
    items_per_page: Optional[int] = None

    def to_query_params(self) -> Dict[str, Any]:
        return {
            "keywords": self.search_term,
            "fileType": self.file_type,
            "orderBy": self.order_by,
            "orderByDirection": self.order_by_direction,
            "ccm_paging_p": self.current_page,
            "ipp": self.items_per_page,
        }

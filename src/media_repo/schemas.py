####################################
# --- Request/response schemas --- #
####################################

from dataclasses import dataclass
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """The two kinds of media the repository accepts."""
    MUSIC = "music"
    VIDEO = "video"

    @property
    def field_name(self) -> str:
        """Multipart field the upload endpoint reads the file from."""
        return self.value

    @property
    def folder(self) -> str:
        """Directory (local) or key prefix (S3) the category is stored under."""
        return "music" if self is Category.MUSIC else "videos"

    @property
    def listing_key(self) -> str:
        """Key the category is reported under by `GET /api/files`."""
        return self.folder

    @property
    def label(self) -> str:
        return "Music" if self is Category.MUSIC else "Video"


@dataclass(frozen=True)
class StoredFile:
    """An upload the storage backend has accepted."""
    category: Category
    original_name: str
    stored_name: str
    url: str


class FileEntry(BaseModel):
    """A stored file as reported by a listing."""
    name: str = Field(
        description="The stored (sanitized) name of the file.",
        json_schema_extra={"example": "1718000000000-my_song.mp3"},
    )
    url: str = Field(
        description="Where the file can be retrieved from.",
        json_schema_extra={"example": "/uploads/music/1718000000000-my_song.mp3"},
    )


class UploadResponse(BaseModel):
    """Response model for `POST /upload/{music,video}`."""
    message: str = Field(description="A message about the operation.")
    name: str = Field(description="The stored name of the uploaded file.")
    url: str = Field(description="Where the uploaded file can be retrieved from.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Music uploaded successfully",
                "name": "1718000000000-my_song.mp3",
                "url": "/uploads/music/1718000000000-my_song.mp3",
            }
        }
    )


class ListFilesResponse(BaseModel):
    """Response model for `GET /api/files`."""
    music: List[FileEntry]
    videos: List[FileEntry]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "music": [
                    {
                        "name": "1718000000000-my_song.mp3",
                        "url": "/uploads/music/1718000000000-my_song.mp3",
                    }
                ],
                "videos": [],
            }
        }
    )

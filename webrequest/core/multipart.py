"""Multipart form sections, encoded by httpx's multipart form builder."""

from typing import Any, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class MultipartFormSection(BaseModel):
    """A single part of a multipart/form-data body."""

    model_config = ConfigDict(frozen=True)

    name: str = Field()
    data: Union[bytes, str] = Field()
    file_name: Optional[str] = Field(default=None)
    content_type: Optional[str] = Field(default=None)

    def as_file_tuple(self) -> Tuple[Optional[str], bytes, Optional[str]]:
        data = self.data.encode("utf-8") if isinstance(self.data, str) else self.data
        return (self.file_name, data, self.content_type)


class MultipartFormDataSection(MultipartFormSection):
    """A plain form field."""

    pass


class MultipartFormFileSection(MultipartFormSection):
    """A file upload part."""

    file_name: Optional[str] = Field(default="file.dat")
    content_type: Optional[str] = Field(default="application/octet-stream")


def to_httpx_files(sections: Sequence[MultipartFormSection]) -> List[Tuple[str, Any]]:
    """Converts sections to the ``files`` argument accepted by httpx."""
    if not sections:
        raise ValueError("A multipart body requires at least one section")
    return [(section.name, section.as_file_tuple()) for section in sections]

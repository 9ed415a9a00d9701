"""
Drive item models.

Subset of the OneDrive / SharePoint driveItem resource used by the file
handler and its jobs.

Dependencies: pydantic
System role: Remote storage API contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class ItemReference(BaseModel):
    """Reference to the folder containing an item."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    drive_id: str = Field(alias="driveId")
    id: str


class DriveItem(BaseModel):
    """Drive item metadata."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    web_url: str | None = Field(default=None, alias="webUrl")
    size: int | None = None
    parent_reference: ItemReference | None = Field(default=None, alias="parentReference")


class FileData(BaseModel):
    """Downloaded file content with its name."""

    filename: str
    content: bytes

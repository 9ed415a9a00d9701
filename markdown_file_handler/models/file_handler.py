"""
File handler request and response models.

Activation parameters posted by OneDrive / SharePoint when a user opens a file
with this handler, and the models returned by the file actions.

Dependencies: pydantic
System role: File handler API contracts
"""

import enum
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from markdown_file_handler.core.exceptions import ValidationError


class FileAccess(str, enum.Enum):
    """Access mode a file is opened with."""

    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"


class ActivationParameters(BaseModel):
    """
    File handler activation parameters.

    Two generations of activation payloads exist: the current one posts an
    ``items`` JSON array of item URLs, the legacy one posts ``resourceId`` with
    ``fileGet`` / ``filePut`` URLs.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    item_urls: list[str] = Field(default_factory=list, alias="items")
    culture_name: str | None = Field(default=None, alias="cultureName")
    client: str | None = None
    user_id: str | None = Field(default=None, alias="userId")
    app_id: str | None = Field(default=None, alias="appId")
    domain_hint: str | None = Field(default=None, alias="domainHint")
    resource_id: str | None = Field(default=None, alias="resourceId")
    file_get: str | None = Field(default=None, alias="fileGet")
    file_put: str | None = Field(default=None, alias="filePut")
    file_name: str | None = Field(default=None, alias="fileName")
    file_id: str | None = Field(default=None, alias="fileId")
    file_content: str | None = Field(default=None, alias="content")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ActivationParameters":
        """
        Build parameters from posted form fields.

        Raises:
            ValidationError: If the items field is not a JSON array of strings
        """
        data = {key: value for key, value in form.items() if isinstance(value, str)}
        raw_items = data.pop("items", None)
        if raw_items:
            try:
                items = json.loads(raw_items)
            except json.JSONDecodeError as exc:
                raise ValidationError("items must be a JSON array of URLs", field="items") from exc
            if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
                raise ValidationError("items must be a JSON array of URLs", field="items")
            data["items"] = items
        return cls.model_validate(data)

    @classmethod
    def from_cookie(cls, value: str | None) -> "ActivationParameters":
        """Build parameters from the JSON stored in the activation cookie."""
        if not value:
            return cls()
        try:
            data = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError("Activation cookie is not valid JSON") from exc
        if not isinstance(data, dict):
            raise ValidationError("Activation cookie must hold a JSON object")
        if isinstance(data.get("items"), str):
            return cls.from_form(data)
        return cls.model_validate(data)

    @property
    def item_url(self) -> str | None:
        return self.item_urls[0] if self.item_urls else None

    @property
    def can_read(self) -> bool:
        return bool(self.item_urls) or bool(self.resource_id and self.file_get)

    @property
    def can_write(self) -> bool:
        return bool(self.item_urls) or bool(self.resource_id and self.file_put)

    def to_dict(self) -> dict[str, str]:
        """Flatten to string pairs for recording on a job's status."""
        result: dict[str, str] = {}
        for name, value in self.model_dump(by_alias=True, exclude={"file_content"}).items():
            if value is None or value == []:
                continue
            result[name] = json.dumps(value) if isinstance(value, list) else str(value)
        return result


class MarkdownFileModel(BaseModel):
    """Markdown document returned by the preview, open and edit actions."""

    file_name: str = ""
    content: str = ""
    read_only: bool = True
    error: str | None = None
    item_url: str | None = None

    @classmethod
    def error_model(
        cls, parameters: ActivationParameters | None, error: str | Exception
    ) -> "MarkdownFileModel":
        message = error.message if hasattr(error, "message") else str(error)
        return cls(
            file_name=(parameters.file_name or "") if parameters else "",
            error=message,
            item_url=parameters.item_url if parameters else None,
        )

    @classmethod
    def writeable_model(
        cls,
        parameters: ActivationParameters,
        file_name: str,
        content: str,
        read_only: bool = False,
    ) -> "MarkdownFileModel":
        return cls(
            file_name=file_name or parameters.file_name or "",
            content=content,
            read_only=read_only,
            item_url=parameters.item_url,
        )


class SaveResults(BaseModel):
    """Result of saving edited content back to the drive."""

    success: bool = False
    error: str | None = None

# =============================================================================
# Attachment Model
# =============================================================================
# Embedded binary-like property values (e.g. photos) and the convention used
# to recognise them inside otherwise JSON-shaped property bags.
# =============================================================================

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

__all__ = [
    "ATTACHMENT_TAG",
    "ATTACHMENT_PLACEHOLDER",
    "Attachment",
    "is_attachment",
    "attachment_label",
]

ATTACHMENT_TAG = "_att"
"""Key that marks a mapping value as an attachment."""

ATTACHMENT_PLACEHOLDER = "[attachment]"


class Attachment(BaseModel):
    """
    Embeddable binary-like value stored inside a property bag.

    Exactly how the bytes travel (inline content or a data URI) is the
    concern of importers and exporters; the core only needs the tag and the
    display name.

    Attributes:
        name: Display name, usually the original file name
        data_url: Embeddable data reference (e.g. "data:image/jpeg;base64,...")
        content: Raw binary content
        mime_type: Media type of the content
        size: Size in bytes, if known
    """

    name: Optional[str] = Field(None, description="Display name")
    data_url: Optional[str] = Field(None, description="Embeddable data reference")
    content: Optional[bytes] = Field(None, description="Raw binary content")
    mime_type: Optional[str] = Field(None, description="Media type")
    size: Optional[int] = Field(None, ge=0, description="Size in bytes")

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "Attachment":
        """
        Build an Attachment from a tagged mapping.

        Accepts the importer spelling ({"_att": True, "name": ..., "dataUrl": ...,
        "type": ..., "size": ...}) as well as the model's own field names.
        """
        return cls(
            name=value.get("name"),
            data_url=value.get("data_url", value.get("dataUrl")),
            content=value.get("content"),
            mime_type=value.get("mime_type", value.get("type")),
            size=value.get("size"),
        )


def is_attachment(value: Any) -> bool:
    """Return True when a property value follows the attachment convention."""
    if isinstance(value, Attachment):
        return True
    return isinstance(value, Mapping) and bool(value.get(ATTACHMENT_TAG))


def attachment_label(value: Any) -> str:
    """Plain-text stand-in for an attachment: its name, or a placeholder."""
    if isinstance(value, Attachment):
        name = value.name
    else:
        name = value.get("name")
    return name or ATTACHMENT_PLACEHOLDER

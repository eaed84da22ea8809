"""
Data models for inventory records.
"""
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field


def photo_url_for(item_id: str) -> str:
    return f"/inventory/{item_id}/photo"


class InventoryItem(BaseModel):
    """One inventory record as stored in inventory.json."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    # Documents written by the old Node service use "inventory_name"
    name: str = Field(validation_alias=AliasChoices("name", "inventory_name"))
    description: str = ""
    photo_filename: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("photoFilename", "photo_filename"),
        serialization_alias="photoFilename",
    )

    @computed_field(alias="photoUrl")
    @property
    def photo_url(self) -> Optional[str]:
        """Derived from photo_filename; a stored photoUrl is never trusted."""
        if self.photo_filename:
            return photo_url_for(self.id)
        return None

    def to_record(self) -> dict:
        """Serialize to the JSON shape used on disk and over HTTP."""
        return self.model_dump(by_alias=True)


class ItemUpdate(BaseModel):
    """Body of PUT /inventory/{id}. Omitted fields stay unchanged."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "inventory_name"))
    description: Optional[str] = None

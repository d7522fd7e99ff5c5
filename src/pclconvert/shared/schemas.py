"""
Pydantic schemas for definition files.

These models validate the records of the framework, portable profile and
framework assembly lists before they are turned into domain descriptors.
Field aliases keep the capitalised attribute names of the definition lists.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DefinitionBase(BaseModel):
    """Base schema for definition records."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class FrameworkDefinition(DefinitionBase):
    """Classic framework record: {Id, Name}."""

    id: int = Field(..., ge=0, alias="Id", description="Host framework id")
    name: str = Field(..., min_length=1, alias="Name", description="Target framework moniker")


class PortableProfileDefinition(DefinitionBase):
    """Portable profile record: {Name, Description}."""

    name: str = Field(..., min_length=1, alias="Name", description="Profile name, e.g. Profile136")
    description: str = Field(..., min_length=1, alias="Description")


class FrameworkAssemblyDefinition(DefinitionBase):
    """Known assembly record used by the filesystem host: {Name, Product}."""

    name: str = Field(..., min_length=1, alias="Name", description="Simple assembly name")
    product: str = Field(..., min_length=1, alias="Product", description="AssemblyProduct value")

"""Data models for tool metadata and the generated manifest."""

from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import ValidatorFunctionWrapHandler
from pydantic import field_validator

DEFAULT_CATEGORY = "Other"
DEFAULT_ORDER = 999


class ToolMeta(BaseModel):
    """Optional per-tool metadata read from meta.json. Every field may be absent."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[List[str]] = None
    order: Optional[int] = None
    icon: Optional[str] = None

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        # A bad value resets only its own field
        try:
            return handler(value)
        except ValidationError:
            return None


class ToolDescriptor(BaseModel):
    """A single catalog entry, identified by its directory slug."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Tool directory name (slug)")
    path: str = Field(description="Relative URL of the tool directory")
    name: str
    category: str = DEFAULT_CATEGORY
    description: str = ""
    keywords: List[str] = Field(default_factory=list)
    order: int = DEFAULT_ORDER
    icon: str = ""


class Manifest(BaseModel):
    """The catalog document served as tools-manifest.json."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: str = Field(alias="generatedAt", description="ISO-8601 UTC timestamp of the run")
    categories: List[str] = Field(default_factory=list)
    tools: List[ToolDescriptor] = Field(default_factory=list)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)

"""
Pydantic models for the Product Routine Assistant
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Message roles for conversation"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ChatMessage(BaseModel):
    """Individual conversation turn"""
    role: MessageRole
    content: str

    def to_prompt(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Product(BaseModel):
    """Catalogue product; text fields are never None."""
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    name: str = ""
    brand: str = ""
    category: str = ""
    description: str = ""
    image: str = ""
    sku: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> str:
        return str(value)

    @field_validator("name", "brand", "category", "description", "image", mode="before")
    @classmethod
    def _blank_if_missing(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("sku", mode="before")
    @classmethod
    def _sku_as_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], index: int) -> "Product":
        """Build a product from a catalogue record, deriving an id when absent."""
        data = dict(raw)
        product_id = data.get("id") or data.get("sku") or f"{data.get('name') or ''}-{index}"
        data["id"] = product_id
        return cls(**data)

    def record(self) -> Dict[str, Any]:
        """Full catalogue record, including fields the model does not declare."""
        return self.model_dump(exclude_none=True)


class SelectedProduct(BaseModel):
    """Snapshot of a product taken when the user selected it"""
    id: str
    name: str = "Product"
    brand: str = ""
    category: str = ""
    description: str = ""

    @classmethod
    def from_metadata(cls, product_id: str, metadata: Any) -> "SelectedProduct":
        if isinstance(metadata, BaseModel):
            metadata = metadata.model_dump()
        metadata = metadata or {}
        return cls(
            id=str(product_id),
            name=str(metadata.get("name") or "Product"),
            brand=str(metadata.get("brand") or ""),
            category=str(metadata.get("category") or ""),
            description=str(metadata.get("description") or ""),
        )


class Suggestion(BaseModel):
    """A catalogue product proposed for a routine step nobody selected a product for"""
    category: str
    product: Product


class ChatResponse(BaseModel):
    """Result of a free-form chat turn"""
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)


class RoutineResponse(BaseModel):
    """Result of a routine generation request"""
    message: str
    product_count: int
    suggestions: List[Suggestion] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

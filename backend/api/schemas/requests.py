"""
API Request Schemas

Pydantic models for API request validation. Datasets are always sent
inline; the API never loads data from storage.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from core.models import ColumnDescriptor, Dataset, SemanticType


class ColumnModel(BaseModel):
    """Column descriptor."""

    name: str = Field(..., min_length=1, description="Column name")
    type: SemanticType = Field(..., description="Semantic type of the column")


class DatasetPayload(BaseModel):
    """Rows plus column descriptors."""

    columns: list[ColumnModel] = Field(..., description="Column descriptors")
    rows: list[dict[str, Any]] = Field(default=[], description="Data rows")

    def to_dataset(self) -> Dataset:
        return Dataset(
            columns=tuple(ColumnDescriptor(c.name, c.type) for c in self.columns),
            rows=tuple(self.rows),
        )


class QuestionRequest(BaseModel):
    """Question about an inline dataset."""

    question: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="Free-text question about the dataset"
    )
    dataset: DatasetPayload


class VisualizeRequest(QuestionRequest):
    """Question to answer with a full visualization."""

    seed: Optional[int] = Field(
        default=None,
        description="Seed for network edge generation (reproducible graphs)"
    )

"""
Curation request models.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EditorChoicePlacement(BaseModel):
    model_config = ConfigDict(extra="ignore")

    article_id: Union[int, str]
    position: int = Field(ge=0)


class HeadlinePlacement(EditorChoicePlacement):
    headline_category: Optional[str] = None


class HeadlineBatch(BaseModel):
    headlines: List[HeadlinePlacement]


class EditorChoiceBatch(BaseModel):
    # The front-end posts editor choices under the same key as headlines
    headlines: List[EditorChoicePlacement]

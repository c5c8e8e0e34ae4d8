from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationMeta(ApiModel):
    page: int
    page_size: int
    total: int


T = TypeVar("T")


class Page(ApiModel, Generic[T]):
    items: list[T]
    page: int
    page_size: int
    total: int

    @computed_field(return_type=PaginationMeta)
    @property
    def pagination(self) -> PaginationMeta:
        return PaginationMeta(page=self.page, page_size=self.page_size, total=self.total)

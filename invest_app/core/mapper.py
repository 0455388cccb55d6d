from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    """Maps ORM rows, or their cached JSON form, onto response schemas."""

    @staticmethod
    def one(item, schema: Type[T]) -> T:
        return schema.model_validate(item)

    @staticmethod
    def many(items: Iterable, schema: Type[T]) -> list[T]:
        return [schema.model_validate(item) for item in items]

    @staticmethod
    def dump_many(items: Iterable[BaseModel]) -> list[dict]:
        return [item.model_dump(mode="json") for item in items]

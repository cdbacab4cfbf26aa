"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class BaseUseCase(ABC, Generic[RequestT, ResultT]):
    """Base use case: takes one request model, returns one result."""

    @abstractmethod
    async def execute(self, request: RequestT) -> ResultT:
        pass

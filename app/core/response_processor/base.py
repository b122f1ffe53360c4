from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from libs.api_client.models import ApiResponse

T = TypeVar("T")
R = TypeVar("R")


class ResponseProcessor(ABC, Generic[T, R]):
    """
    Post-processing strategy for one response shape.

    Processors are registered next to the sequential service so callers can
    add shape specific handling without touching the chain logic.
    """

    name: str = ""
    """the unique name of the processor, defaults to the class name"""

    @abstractmethod
    def can_process(self, shape: Any) -> bool:
        """
        Whether this processor handles the given response shape.

        :param shape: a shape descriptor, usually the body type
        :return: True if ``process`` accepts responses of this shape
        """
        raise NotImplementedError

    @abstractmethod
    def process(self, response: ApiResponse[T]) -> R:
        """
        Extract the relevant data from a response.

        :param response: the API response
        :return: the processed data
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name or self.__class__.__name__}>"

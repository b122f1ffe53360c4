import inspect
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from core.response_processor.base import ResponseProcessor
from exceptions.api import SerializationError
from libs.api_client.models import ApiResponse

M = TypeVar("M", bound=BaseModel)


class ModelResponseProcessor(ResponseProcessor[Any, M], Generic[M]):
    """
    Validates a response body into a pydantic model.
    """

    def __init__(self, model: type[M]):
        self.model = model
        self.name = f"model:{model.__name__}"

    def can_process(self, shape: Any) -> bool:
        return inspect.isclass(shape) and issubclass(shape, self.model)

    def process(self, response: ApiResponse[Any]) -> M:
        if isinstance(response.body, self.model):
            return response.body
        try:
            return self.model.model_validate(response.body)
        except ValidationError as e:
            raise SerializationError(
                f"Response body is not a valid {self.model.__name__}",
                status_code=response.status_code,
                body=response.body_text(),
                cause=e,
            )

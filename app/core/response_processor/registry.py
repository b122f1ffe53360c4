import logging
from collections.abc import Iterator
from typing import Any

from core.response_processor.base import ResponseProcessor
from libs.api_client.models import ApiResponse

logger = logging.getLogger(__name__)


class ResponseProcessorRegistry:
    """Ordered processors with first-match selection."""

    def __init__(self, processors: list[ResponseProcessor] | None = None):
        self._processors: list[ResponseProcessor] = list(processors or [])

    def register(self, processor: ResponseProcessor) -> ResponseProcessor:
        self._processors.append(processor)
        return processor

    def find(self, shape: Any) -> ResponseProcessor | None:
        for processor in self._processors:
            if processor.can_process(shape):
                return processor
        return None

    def process(self, response: ApiResponse[Any], shape: Any | None = None) -> Any:
        """
        Run the first processor accepting ``shape``.

        :param response: the response to process
        :param shape: the shape descriptor, defaults to the type of the body
        :return: the processor result
        :raises LookupError: when no registered processor accepts the shape
        """
        if shape is None:
            shape = type(response.body)
        processor = self.find(shape)
        if processor is None:
            raise LookupError(f"No response processor registered for {shape!r}")
        logger.debug(f"Processing response with {processor!r}")
        return processor.process(response)

    def __iter__(self) -> Iterator[ResponseProcessor]:
        return iter(self._processors)

    def __len__(self) -> int:
        return len(self._processors)

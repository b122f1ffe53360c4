from core.response_processor.base import ResponseProcessor
from core.response_processor.model_processor import ModelResponseProcessor
from core.response_processor.registry import ResponseProcessorRegistry

__all__ = [
    "ModelResponseProcessor",
    "ResponseProcessor",
    "ResponseProcessorRegistry",
]

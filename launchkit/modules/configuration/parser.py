from typing import Callable, List, Type, TypeVar
from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from ...errors import ConfigurationError
from .layered import LayeredConfiguration

M = TypeVar('M', bound=BaseModel)

def _build_validation_error_message(errors: List[ErrorDetails]) -> str:
    """Build a readable message from a list of Pydantic validation errors."""
    messages = []
    for error in errors:
        field_path = " -> ".join(str(loc) for loc in error['loc'])
        msg = error['msg']
        messages.append(f"Error in field '{field_path}': {msg}")

    return "\n".join(messages)

def model_parser(model: Type[M]) -> Callable[[LayeredConfiguration], M]:
    """
    Create a parser that validates a layered configuration into a pydantic model.

    Args:
        model: The pydantic model class to build

    Returns:
        A callable accepting a LayeredConfiguration and returning the model

    Raises:
        ConfigurationError: From the returned callable, if validation fails
    """
    def parse(configuration: LayeredConfiguration) -> M:
        try:
            return model.model_validate(configuration.to_dict())
        except ValidationError as e:
            raise ConfigurationError(_build_validation_error_message(e.errors()))

    return parse

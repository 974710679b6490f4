"""Request model: declare the parameters a handler expects and get them
extracted, coerced, defaulted and validated from params, query and body.
"""

from request_model.definitions import (
    DEFAULT_OUTPUT,
    DEFAULT_SOURCES,
    FieldDefinition,
    Validation,
    compile_definition,
    load_definition,
    merge_definitions,
)
from request_model.errors import (
    CoercionError,
    DefinitionError,
    EnumError,
    MissingParameterError,
    ModelError,
    ValidationFailedError,
)
from request_model.middleware import model
from request_model.runtime import extract
from request_model.schemas import Extraction

__all__ = [
    "DEFAULT_OUTPUT",
    "DEFAULT_SOURCES",
    "CoercionError",
    "DefinitionError",
    "EnumError",
    "Extraction",
    "FieldDefinition",
    "MissingParameterError",
    "ModelError",
    "Validation",
    "ValidationFailedError",
    "compile_definition",
    "extract",
    "load_definition",
    "merge_definitions",
    "model",
]

"""Best-effort structural coercion of arbitrary JSON-like documents."""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def coerce(model: type[M], document: Any, default: M) -> M:
    """
    Reshape ``document`` into ``model``, falling back to ``default``.

    A ``None`` document is treated as an empty one, so models whose fields
    all have defaults come out empty rather than failing.

    Args:
        model: Target pydantic model
        document: Arbitrary decoded JSON value (mapping, list, scalar or None)
        default: Value returned when the document does not fit the model

    Returns:
        The validated model instance, or ``default``
    """
    if isinstance(document, model):
        return document
    if document is None:
        document = {}

    try:
        return model.model_validate(document)
    except ValidationError as e:
        logger.debug("Could not coerce document into %s: %s", model.__name__, e)
        return default

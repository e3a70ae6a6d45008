"""
Import/export codec for the fitness document.

Export is pretty-printed JSON of the whole document. Import is a top-level
shallow merge: keys present in the imported object replace the current
ones wholesale, keys absent from it are kept.
"""

import json
import logging

from pydantic import ValidationError

from fitness_ledger.domain.document import FitnessDocument
from fitness_ledger.utils.exceptions import InvalidFormatError

logger = logging.getLogger(__name__)


def serialize(document: FitnessDocument, indent: int = 2) -> str:
    """
    Serialize a document to pretty-printed JSON.

    Args:
        document: Document to serialize.
        indent: Indentation width.

    Returns:
        JSON text.
    """
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False)


def merge(current: FitnessDocument, raw: str | bytes) -> FitnessDocument:
    """
    Parse an imported JSON document and merge it onto `current`.

    Nested objects such as `profile` and `targets` are replaced, not merged
    field by field. Unknown top-level keys are ignored.

    Args:
        current: Document the import is applied to. Never modified.
        raw: Imported JSON text.

    Returns:
        New merged document.

    Raises:
        InvalidFormatError: If `raw` is not a JSON object or the merged
            result is not a valid document.
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise InvalidFormatError(
            f"Imported JSON must be an object, got {type(parsed).__name__}"
        )

    merged = {**current.to_dict(), **parsed}

    try:
        document = FitnessDocument.model_validate(merged)
    except ValidationError as e:
        raise InvalidFormatError(f"Imported document is invalid: {e}") from e

    logger.debug(f"Merged imported keys: {sorted(parsed)}")
    return document

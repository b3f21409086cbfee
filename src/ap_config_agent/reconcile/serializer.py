"""Canonical text form of a device configuration.

Two-space indented JSON with sorted keys and bare field names. The same
text is logged, persisted, and accepted back by ``load_config_file``.
"""
import json

from ..config.schema import DeviceConfigTree
from ..errors import SerializationError

INDENT = 2


def emit_json(tree: DeviceConfigTree) -> str:
    """Render ``tree`` as canonical JSON.

    Raises:
        SerializationError: If the tree cannot be rendered
    """
    try:
        return json.dumps(tree.to_dict(), indent=INDENT, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to serialize configuration: {e}") from e

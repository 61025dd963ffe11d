"""joseutils utilities."""
from typing import Any
from typing import Dict

import josepy as jose


def decode_raw_json(value: Any) -> Any:
    """Field decoder keeping a JSON value as decoded by :mod:`json`.

    Unlike :meth:`josepy.Field.default_decoder` no frozen copies are
    made, so the value can be dumped back with :func:`json.dumps`.

    """
    return value


def decode_json_object(value: Any) -> Dict[str, Any]:
    """Field decoder for a raw JSON object."""
    if not isinstance(value, dict):
        raise jose.DeserializationError('{0!r} is not a JSON object'.format(value))
    return value

from typing import Any, Dict

from receipt_service.errors import PayloadShapeError

def ensure_mapping(value: Any) -> Dict[str, Any]:
    # arrays, scalars and null are rejected; {} is fine
    if not isinstance(value, dict):
        raise PayloadShapeError()
    return value

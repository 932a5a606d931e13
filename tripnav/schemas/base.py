from typing import Any, Optional


def ok(data: Any = None) -> dict:
    return {"status": "ok", "data": data, "error": None, "error_code": None}


def error(message: str, error_code: Optional[str] = None, data: Any = None) -> dict:
    return {"status": "error", "data": data, "error": message, "error_code": error_code}

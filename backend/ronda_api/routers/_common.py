"""
Shared router helpers.
"""

from fastapi.responses import JSONResponse

from shared.utils.result import Result


def respond(result: Result, success_status: int = 200) -> JSONResponse:
    """Translate a service `Result` into the uniform JSON envelope."""
    status_code = success_status if result.ok else result.status_code
    return JSONResponse(result.to_response(), status_code=status_code)

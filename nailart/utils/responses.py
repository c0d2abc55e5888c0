from fastapi.responses import JSONResponse
from typing import Dict, Any, Optional


def error_response(message: str, status_code: int = 500, extra_data: Optional[Dict[str, Any]] = None) -> JSONResponse:
    """
    Standardized error response helper

    Args:
        message: Error message
        status_code: HTTP status code
        extra_data: Additional data to include in the response

    Returns:
        JSONResponse with the given status code
    """
    response_data = {
        'success': False,
        'error': message
    }
    if extra_data:
        response_data.update(extra_data)

    return JSONResponse(status_code=status_code, content=response_data)


def success_response(data: Dict[str, Any] = None, status_code: int = 200) -> JSONResponse:
    """
    Standardized success response helper

    Args:
        data: Data to include in the response
        status_code: HTTP status code

    Returns:
        JSONResponse with the given status code
    """
    if data is None:
        data = {}

    return JSONResponse(status_code=status_code, content={
        'success': True,
        'data': data
    })

import logging
import re

from fastapi import (
    HTTPException,
    status,
    Request
)
from langdetect import DetectorFactory, LangDetectException, detect

from ...dependencies.dependency_container import dependency_container

WALLET_ADDRESS_PATTERN = r"0x[a-fA-F0-9]{40}"
HINDI_LANGUAGE_CODE = "hi"
LANGUAGE_DETECTION_MIN_LETTERS = 3

# Detection is probabilistic; a fixed seed keeps it deterministic across requests.
DetectorFactory.seed = 0

def extract_status_code(
    exception,
    fallback: status
):
    """
    Attempts to extract a status code for an Exception object whose underlying type we don't know.
    """
    if isinstance(exception, HTTPException):
        return exception.status_code

    # Driver errors carry their own `code` numbers; only `status_code` is an HTTP status.
    value = getattr(exception, "status_code", None)
    if isinstance(value, int) and 400 <= value < 600:
        return value
    return fallback

def extract_error_detail(
    exception
):
    """
    Returns the client-facing detail for an exception, preserving structured HTTPException details.
    """
    if isinstance(exception, HTTPException):
        return exception.detail
    return str(exception)

def is_valid_wallet_address(
    wallet_address: str
) -> bool:
    if len(wallet_address or '') == 0:
        return False
    return bool(re.fullmatch(WALLET_ADDRESS_PATTERN, wallet_address))

def is_hindi_text(
    text: str
) -> bool:
    """
    Returns a flag representing whether the incoming text is detected as Hindi.
    Inputs with fewer than 3 letters are never considered Hindi.
    """
    letters = [character for character in (text or '') if character.isalpha()]
    if len(letters) < LANGUAGE_DETECTION_MIN_LETTERS:
        return False

    try:
        return detect(text) == HINDI_LANGUAGE_CODE
    except LangDetectException:
        return False

def retrieve_ip_address(request: Request) -> str:
    """
    Extracts the IP address from the request.
    This function checks the "X-Forwarded-For" header first, which is commonly used in
    load-balanced environments. If that header is not present, it falls back to the
    "client.host" attribute of the request.
    """
    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None

def raise_http_exception(
    request: Request,
    exception: Exception,
    fallback: status,
    **kwargs
):
    """
    Reports a failed API invocation to the monitoring client and re-raises it as an HTTPException.

    Arguments:
    request – the request that failed.
    exception – the underlying exception.
    fallback – the status code to be used when none can be extracted from the exception.
    kwargs – the set of optional monitoring tags.
    """
    status_code = extract_status_code(exception, fallback=fallback)
    detail = extract_error_detail(exception)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logging.error(f"[{request.method} {request.url.path}] {detail}")

    dependency_container.inject_influx_client().log_error(
        endpoint_name=request.url.path,
        method=request.method,
        error_code=status_code,
        description=str(detail),
        **kwargs
    )
    raise HTTPException(status_code=status_code, detail=detail) from exception

def validate_wallet_address(
    request: Request,
    wallet_address: str | None,
    missing_detail: str = "Wallet address is required"
):
    """
    Raises a 400 HTTPException when the incoming wallet address is missing or malformed.
    """
    if len(wallet_address or '') == 0:
        detail = missing_detail
    elif not is_valid_wallet_address(wallet_address):
        detail = "Invalid wallet address"
    else:
        return

    raise_http_exception(
        request=request,
        exception=HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail),
        fallback=status.HTTP_400_BAD_REQUEST
    )

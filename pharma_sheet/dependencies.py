from typing import Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from pharma_sheet.config import get_settings
from pharma_sheet.core.security import authenticate_request
from pharma_sheet.database.session import get_db

api_key_header = APIKeyHeader(name=get_settings().API_KEY_HEADER, auto_error=False)


def require_auth(api_key: Optional[str] = Security(api_key_header)):
    return authenticate_request(api_key=api_key)


__all__ = ["get_db", "require_auth"]

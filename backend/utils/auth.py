from fastapi import Depends, Security
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional
from utils.config import Settings
from utils.dependencies import get_settings
from utils.errors import AuthError
import hmac
import logging

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)
bearer = HTTPBearer(auto_error=False)


def extract_token(
    api_key: Optional[str], credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if api_key:
        return api_key
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


def is_valid_token(token: Optional[str], admin_token: str) -> bool:
    if not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), admin_token.encode("utf-8"))


async def require_admin_token(
    api_key: Optional[str] = Security(api_key_header),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer),
    settings: Settings = Depends(get_settings),
):
    token = extract_token(api_key, credentials)
    if not is_valid_token(token, settings.admin_token):
        logger.warning("Rejected write request with missing or invalid credential")
        raise AuthError()
    return token

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from recipe_discovery.app.core.config import Settings, get_settings
from recipe_discovery.app.db.session import get_db
from recipe_discovery.app.schemas.auth import CurrentUser
from recipe_discovery.app.services.identity_client import IdentityClient

security = HTTPBearer(auto_error=True)
optional_security = HTTPBearer(auto_error=False)


def _decode_token(token: str) -> CurrentUser:
    settings = get_settings()
    try:
        # Identity-service tokens carry an "authenticated" audience; not checked here.
        payload = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return CurrentUser(id=str(sub), email=payload.get("email"))


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    return _decode_token(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[CurrentUser]:
    """Anonymous callers get None; a present but bad token is still rejected."""
    if credentials is None:
        return None
    return _decode_token(credentials.credentials)


def get_db_session(db: Session = Depends(get_db)) -> Session:
    return db


def get_app_settings() -> Settings:
    return get_settings()


def get_identity_client(settings: Settings = Depends(get_app_settings)) -> IdentityClient:
    if not settings.auth_base_url:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Identity service not configured")
    return IdentityClient(
        settings.auth_base_url,
        api_key=settings.auth_api_key,
        timeout_seconds=settings.auth_timeout_seconds,
    )

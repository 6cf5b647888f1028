import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.schemas.context import UserContext

logger = logging.getLogger("assignment.auth")

security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    role: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Genera un JWT con le stesse impostazioni usate in verifica.

    I token veri li emette il servizio di identità; qui serve per test e tooling locale.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))
    claims = {"sub": str(user_id), "role": role, "iat": now, "exp": expire}
    if name:
        claims["name"] = name
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


class AuthService:

    @staticmethod
    def authenticate(token: str) -> UserContext:
        """Decodifica il token e ritorna l'identità; 401 se non valido."""
        unauthorized = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        except JWTError as e:
            logger.warning("Token rifiutato: %s", e)
            raise unauthorized

        user_id = payload.get("sub")
        role = payload.get("role")
        if not user_id or role not in ("teacher", "student"):
            logger.warning("Token senza sub/role validi")
            raise unauthorized

        return UserContext(
            user_id=str(user_id),
            role=role,
            name=payload.get("name"),
            email=payload.get("email"),
        )

    @staticmethod
    async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    ) -> UserContext:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No token, authorization denied",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return AuthService.authenticate(credentials.credentials)

    @staticmethod
    def require_role(role: str):
        async def _checker(user: UserContext = Depends(AuthService.get_current_user)) -> UserContext:
            if user.role != role:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Access denied. {role.capitalize()} role required",
                )
            return user
        return _checker

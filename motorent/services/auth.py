import datetime as dt, jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer
from motorent.core.config import settings

bearer = HTTPBearer(auto_error=False)


def _sign(user_id: str, email: str, *, admin: bool = False, ttl_h: int = 1) -> str:
    payload = {"sub": user_id, "email": email, "admin": admin,
               "exp": dt.datetime.now(dt.timezone.utc) + dt.timedelta(hours=ttl_h)}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


async def get_current_user(request: Request, cred = Depends(bearer)):
    if not cred:
        raise HTTPException(401, "Missing token")
    try:
        payload = jwt.decode(
            cred.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            leeway=30,              # clock skew cushion
            options={"require": ["exp"]},
        )
        request.state.user_id = payload.get("sub")
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(401, "Invalid token")


async def require_admin(user = Depends(get_current_user)):
    if user.get("admin") is not True:
        raise HTTPException(403, "Admin only")
    return user

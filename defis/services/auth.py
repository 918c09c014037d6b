from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Annotated

from ..config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

def unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

# Tokens are minted by the identity provider; this helper exists for tooling and tests
def create_access_token(user_id: str, expires_delta: timedelta = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": user_id, "type": "access", "exp": expire}
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)

# Decode and check the signature and expiry of the bearer token
def verify_token(token: str = Depends(oauth2_scheme)) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise unauthorized("Could not validate credentials")

# Identity id of the caller, used as the profile primary key
async def get_current_user_id(payload: Annotated[dict, Depends(verify_token)]) -> str:
    if payload.get("type") != "access":
        raise unauthorized("Invalid token type")
    user_id = payload.get("sub")
    if not user_id:
        raise unauthorized("Token has no subject")
    return str(user_id)

"""
认证工具函数

只负责校验请求携带的JWT，登录/签发流程不在本服务内。
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Header, HTTPException, status
from app.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    创建JWT访问token

    Args:
        data: 要编码到token中的数据
        expires_delta: token过期时间增量，默认使用配置中的时间

    Returns:
        str: JWT token字符串
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def verify_token(token: str, raise_on_error: bool = True) -> Optional[Dict[str, Any]]:
    """
    验证JWT token

    Args:
        token: JWT token字符串
        raise_on_error: 验证失败时是否抛出异常，False时返回None

    Raises:
        HTTPException: token无效或过期（如果raise_on_error=True）
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        if raise_on_error:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token无效或已过期",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return None


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> int:
    """
    从请求头获取当前用户ID（Authorization: Bearer {token}，用户ID在sub中）

    Raises:
        HTTPException: 未提供token、格式错误或token无效
    """
    if not authorization or not authorization.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="未提供认证信息",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="认证格式错误，应为: Bearer {token}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_token(parts[1], raise_on_error=True)
    user_id = payload.get("sub")

    try:
        return int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token中未找到用户ID",
            headers={"WWW-Authenticate": "Bearer"},
        )

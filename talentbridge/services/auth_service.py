"""Authentication Service - JWT-based authentication for HQ admins and JV partners."""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

import bcrypt
import jwt
from flask import current_app
from sqlalchemy import func, select

from talentbridge import db, get_redis
from talentbridge.exceptions import InvalidInput
from talentbridge.models import User

logger = logging.getLogger(__name__)


class AuthService:
    """Service for user authentication operations."""

    TOKEN_TYPE = "access"
    REDIS_BLACKLIST_KEY_PREFIX = "talentbridge_blacklist:"
    MIN_PASSWORD_LENGTH = 6

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    @staticmethod
    def _verify_password(user: User, password: str) -> bool:
        """
        Verify password against stored hash.

        Args:
            user: User instance
            password: Plain text password

        Returns:
            True if password matches
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8"))
        except ValueError:
            logger.warning(f"Malformed password hash for user {user.id}")
            return False

    @staticmethod
    def _token_expiry() -> timedelta:
        return current_app.config.get("JWT_EXPIRY", timedelta(hours=12))

    @staticmethod
    def _generate_access_token(user: User) -> str:
        """
        Generate JWT access token.

        Role and JV are included for the client's convenience only; every
        request reloads them from the user directory.
        """
        now = datetime.utcnow()
        payload = {
            "user_id": user.id,
            "email": user.email,
            "role": user.role.value,
            "jv_id": user.jv_id,
            "type": AuthService.TOKEN_TYPE,
            "exp": now + AuthService._token_expiry(),
            "iat": now,
        }
        return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")

    @staticmethod
    def login(email: str, password: str) -> Dict:
        """
        Authenticate a user and issue an access token.

        Raises:
            ValueError: If authentication fails or the account is inactive
        """
        email = (email or "").strip().lower()
        logger.debug(f"Attempting login for email: {email}")

        user = db.session.scalar(select(User).where(func.lower(User.email) == email))
        if not user or not AuthService._verify_password(user, password or ""):
            raise ValueError("Invalid email or password")

        if not user.is_active:
            raise ValueError("Account is inactive. Contact your administrator.")

        user.last_login = datetime.utcnow()
        db.session.commit()

        access_token = AuthService._generate_access_token(user)
        logger.info(f"User logged in: {user.id} ({user.email}) role={user.role.value}")

        return {
            "access_token": access_token,
            "token_type": "Bearer",
            "expires_in": int(AuthService._token_expiry().total_seconds()),
            "user": user.to_dict(),
        }

    @staticmethod
    def logout(user_id: int, access_token: str) -> Dict[str, str]:
        """Blacklist the access token until it would have expired anyway."""
        redis_conn = get_redis()
        if redis_conn is not None:
            redis_conn.setex(
                f"{AuthService.REDIS_BLACKLIST_KEY_PREFIX}{access_token}",
                int(AuthService._token_expiry().total_seconds()),
                "1",
            )
        else:
            logger.debug("Redis unavailable; token expires naturally")

        logger.info(f"User logged out: {user_id}")
        return {"message": "Logged out successfully"}

    @staticmethod
    def _is_blacklisted(access_token: str) -> bool:
        redis_conn = get_redis()
        if redis_conn is None:
            return False
        return bool(redis_conn.exists(f"{AuthService.REDIS_BLACKLIST_KEY_PREFIX}{access_token}"))

    @staticmethod
    def validate_token(access_token: str) -> Tuple[User, Dict]:
        """
        Validate a JWT access token and load the user it belongs to.

        Returns:
            (User, payload)

        Raises:
            ValueError: If token is invalid, expired, revoked, or the user is inactive
        """
        if AuthService._is_blacklisted(access_token):
            raise ValueError("Token has been revoked")

        try:
            payload = jwt.decode(access_token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise ValueError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {str(e)}")

        if payload.get("type") != AuthService.TOKEN_TYPE:
            raise ValueError("Invalid token type")

        user: Optional[User] = db.session.get(User, payload.get("user_id"))
        if not user:
            raise ValueError("User not found")
        if not user.is_active:
            raise ValueError("User account is inactive")

        return user, payload

    @staticmethod
    def change_password(user: User, current_password: str, new_password: str) -> Dict[str, str]:
        """
        Replace the user's password after checking the current one.

        Raises:
            InvalidInput: new password too short, or current password wrong
        """
        if not new_password or len(new_password) < AuthService.MIN_PASSWORD_LENGTH:
            raise InvalidInput(f"Password must be at least {AuthService.MIN_PASSWORD_LENGTH} characters")
        if not AuthService._verify_password(user, current_password or ""):
            raise InvalidInput("Current password is incorrect")

        user.password_hash = AuthService.hash_password(new_password)
        db.session.commit()
        logger.info(f"Password changed for user {user.id}")
        return {"message": "Password updated successfully"}

    @staticmethod
    def update_profile(user: User, name: Optional[str] = None, email: Optional[str] = None) -> User:
        """
        Update the caller's own name and email. Empty values leave a field unchanged.

        Raises:
            InvalidInput: email already used by another account
        """
        if name:
            user.name = name.strip()

        if email:
            email = email.strip().lower()
            taken = db.session.scalar(
                select(User.id).where(func.lower(User.email) == email, User.id != user.id)
            )
            if taken is not None:
                raise InvalidInput("Email is already in use", {"field": "email"})
            user.email = email

        db.session.commit()
        logger.info(f"Profile updated for user {user.id}")
        return user

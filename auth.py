"""
Authentication module for the Security Console
Handles login, logout and the temporary-password change
"""
import hashlib
import logging

from config import AUDIT_EVENTS, MIN_PASSWORD_LENGTH
from errors import ValidationError
from risk_classifier import ActionKind, classify_risk

logger = logging.getLogger(__name__)


def hash_password(password):
    return hashlib.sha256(password.encode()).hexdigest()


def login_user(context, email, password):
    """
    Authenticate user by email and password
    Returns the User on success, None on failure
    """
    user = context.user_manager.get_user_by_email(email)

    if not user:
        logger.warning("Login failed: unknown email %s", email)
        return None

    if context.user_manager.get_password_hash(user.id) != hash_password(password):
        logger.warning("Login failed: invalid password for %s", user.email)
        return None

    context.security_log.append(
        user.email,
        AUDIT_EVENTS["LOGIN"],
        f"User {user.name} signed in as {user.role.value}",
        classify_risk(ActionKind.LOGIN),
    )

    if user.force_password_change:
        logger.info("User %s signed in with a temporary password", user.email)
    return user


def logout_user(context, user):
    """End the interactive session for user"""
    logger.info("User %s signed out", user.email)
    return True


def change_password(context, user, current_password, new_password, confirm_password):
    """
    Replace the user's password
    Clears the temporary-password lock on success
    """
    if new_password != confirm_password:
        raise ValidationError("New password and confirmation do not match")

    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if context.user_manager.get_password_hash(user.id) != hash_password(current_password):
        logger.warning("Password change refused for %s: wrong current password", user.email)
        raise ValidationError("Current password is incorrect")

    context.user_manager.set_password(user.id, hash_password(new_password))
    user.force_password_change = False

    context.security_log.append(
        user.email,
        AUDIT_EVENTS["PASSWORD_CHANGE"],
        f"User {user.name} changed their password",
        classify_risk(ActionKind.PASSWORD_CHANGE),
    )
    return user

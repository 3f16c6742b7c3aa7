"""
Authorization workflow for the Security Console
Moves high-risk events from pending to authorized, for permitted roles only
"""
import logging
from enum import Enum

from config import AUTHORIZER_ROLES
from errors import PermissionDenied, ValidationError

logger = logging.getLogger(__name__)


class AuthorizationState(Enum):
    UNFLAGGED = 'unflagged'
    PENDING_AUTHORIZATION = 'pending_authorization'
    AUTHORIZED = 'authorized'


def state_of(event):
    """Derive the workflow state of an event"""
    if not event.requires_authorization:
        return AuthorizationState.UNFLAGGED
    if event.is_authorized:
        return AuthorizationState.AUTHORIZED
    return AuthorizationState.PENDING_AUTHORIZATION


class AuthorizationWorkflow:
    """
    Enforces who may authorize before the log is touched
    Authorized is terminal: there is no de-authorization
    """

    def __init__(self, security_log, authorizer_roles=AUTHORIZER_ROLES):
        self.security_log = security_log
        self.authorizer_roles = tuple(authorizer_roles)

    def can_authorize(self, user):
        return user.role in self.authorizer_roles and not user.force_password_change

    def authorize(self, actor, event_id, justification):
        """
        Authorize a pending event on behalf of actor
        Returns the updated event
        """
        if not self.can_authorize(actor):
            logger.warning("Authorization of %s refused for %s (%s)",
                           event_id, actor.email, actor.role.value)
            raise PermissionDenied(
                f"Role '{actor.role.value}' is not allowed to authorize security events")

        if not justification or not justification.strip():
            raise ValidationError("A justification is required to authorize an event")

        return self.security_log.authorize(event_id, actor.email, justification)

    def pending_events(self):
        """All events awaiting authorization, newest first"""
        return self.security_log.get_security_events({'pending': True})

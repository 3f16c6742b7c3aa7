from datetime import datetime, timedelta

import pytest

from context import AppContext


class SteppingClock:
    """Deterministic clock advancing one second per reading"""

    def __init__(self, start=datetime(2024, 5, 1, 9, 0, 0)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current

    def rewind(self, seconds):
        self.now = self.now - timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def context(clock):
    ctx = AppContext(clock=clock)
    yield ctx
    ctx.close()


@pytest.fixture
def admin(context):
    return context.user_manager.get_user('user-1')


@pytest.fixture
def manager(context):
    """Ana Silva, manager with a temporary password"""
    return context.user_manager.get_user('user-2')


@pytest.fixture
def collaborator(context):
    """Carlos Pereira, collaborator with a temporary password"""
    return context.user_manager.get_user('user-3')


@pytest.fixture
def superintendent(context):
    return context.user_manager.get_user('user-4')


@pytest.fixture
def auditor(context):
    return context.user_manager.get_user('user-5')


@pytest.fixture
def unlocked_manager(manager):
    manager.force_password_change = False
    return manager


@pytest.fixture
def unlocked_collaborator(collaborator):
    collaborator.force_password_change = False
    return collaborator

"""Tests for shared API helpers."""

import pytest
from fastapi import HTTPException

from api.helpers import get_owned_or_404
from models import Account


class TestGetOwnedOr404:
    def test_returns_owned_entity(self, db, user, account):
        assert get_owned_or_404(db, Account, user.id, account.id).id == account.id

    def test_other_users_entity_is_404(self, db, other_user, account):
        with pytest.raises(HTTPException) as exc_info:
            get_owned_or_404(db, Account, other_user.id, account.id, detail="Account not found")
        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Account not found"

    def test_missing_entity_is_404(self, db, user):
        with pytest.raises(HTTPException):
            get_owned_or_404(db, Account, user.id, "does-not-exist")

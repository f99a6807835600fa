"""UserAuthManager: password hashing, codes and opaque tokens."""

from datetime import timedelta

from app.utils.time import iso_in


def test_password_hash_round_trip(auth_manager):
    hashed = auth_manager.hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert auth_manager.check_password(hashed, "s3cret-pass")
    assert not auth_manager.check_password(hashed, "wrong-pass")


def test_malformed_hash_never_matches(auth_manager):
    assert auth_manager.check_password("not-a-bcrypt-hash", "anything") is False


def test_generated_codes_are_numeric_with_configured_length(auth_manager):
    code = auth_manager.generate_code()
    assert len(code) == 4
    assert code.isdigit()


def test_codes_match_requires_a_stored_code(auth_manager):
    assert auth_manager.codes_match("1234", "1234")
    assert not auth_manager.codes_match("1234", "4321")
    assert not auth_manager.codes_match(None, "1234")
    assert not auth_manager.codes_match("1234", None)


def test_issued_token_is_stored_only_as_hash(auth_manager, user_repo, seed):
    user_id = seed.create_user()
    issued = auth_manager.issue_token(user_id)

    assert issued["type"] == "bearer"
    assert user_repo.find_token(issued["token"]) is None
    assert user_repo.find_token(auth_manager.hash_token(issued["token"]))["user_id"] == user_id


def test_resolve_token_returns_public_user(auth_manager, seed):
    user_id = seed.create_user()
    token = auth_manager.issue_token(user_id)["token"]

    user = auth_manager.resolve_token(token)
    assert user["id"] == user_id
    assert "password_hash" not in user
    assert auth_manager.resolve_token("unknown-token") is None


def test_expired_token_is_rejected_and_removed(auth_manager, user_repo, seed):
    user_id = seed.create_user()
    token_hash = auth_manager.hash_token("stale")
    user_repo.store_token(user_id=user_id, token_hash=token_hash, expires_at=iso_in(timedelta(seconds=-1)))

    assert auth_manager.resolve_token("stale") is None
    assert user_repo.find_token(token_hash) is None


def test_revoke_user_tokens_can_keep_current_one(auth_manager, seed):
    user_id = seed.create_user()
    keep = auth_manager.issue_token(user_id)["token"]
    drop = auth_manager.issue_token(user_id)["token"]

    assert auth_manager.revoke_user_tokens(user_id, keep_token=keep) == 1
    assert auth_manager.resolve_token(keep) is not None
    assert auth_manager.resolve_token(drop) is None


def test_audit_events_are_forwarded(auth_manager, mock_audit_logger):
    auth_manager.audit(7, "login", "success", ip="127.0.0.1")
    mock_audit_logger.log_event.assert_called_once_with(
        actor="7", action="login", resource="user", outcome="success", ip="127.0.0.1"
    )

"""Session store and token hints."""

from medicart.session import (
    ANONYMOUS,
    Session,
    SessionStore,
    decode_claims,
)

from conftest import make_token


class TestLoad:
    def test_restores_from_storage(self):
        token = make_token({"userId": 7})
        store = SessionStore()

        session = store.load({"accessToken": token, "userId": "7", "userRole": "ROLE_USER"})

        assert session.is_authenticated
        assert session.user_id == "7"
        assert session.role == "ROLE_USER"
        assert store.current is session

    def test_null_strings_are_absent(self):
        store = SessionStore()

        session = store.load({"accessToken": "null", "userId": "undefined", "userRole": ""})

        assert not session.is_authenticated
        assert session.user_id is None
        assert session.role is None

    def test_role_falls_back_to_scope_claim(self):
        store = SessionStore()

        session = store.load({"accessToken": make_token({"scope": "ROLE_ADMIN"})})

        assert session.role == "ROLE_ADMIN"


class TestHeaders:
    def test_bearer_prefix_added_once(self):
        assert Session(token="abc").authorization == "Bearer abc"
        assert Session(token="Bearer abc").authorization == "Bearer abc"
        assert ANONYMOUS.authorization is None

    def test_user_id_prefers_token_claim(self):
        session = Session(token=make_token({"userId": 42}), user_id="7")

        assert session.user_id_hint == "42"

    def test_user_id_falls_back_to_stored_id(self):
        session = Session(token="not-a-jwt", user_id="7")

        assert session.user_id_hint == "7"


class TestLifecycle:
    def test_start_then_clear(self):
        store = SessionStore()
        store.start("tok", user_id=9, role="ROLE_USER")

        assert store.dump() == {
            "accessToken": "tok",
            "userId": "9",
            "userRole": "ROLE_USER",
        }

        store.clear()

        assert store.current is ANONYMOUS
        assert store.dump() == {}


class TestDecodeClaims:
    def test_garbage_gives_empty_claims(self):
        assert decode_claims("a.b") == {}
        assert decode_claims("a.!!!.c") == {}

    def test_bearer_prefix_ignored(self):
        token = make_token({"userId": 3})

        assert decode_claims(f"Bearer {token}")["userId"] == 3

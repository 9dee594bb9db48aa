from webforms.auth.session import SessionCookieCodec
from webforms.auth.store import SessionStore
from webforms.permissions import ANONYMOUS, Authenticated, cookie_settings, resolve_identity, safe_next
from webforms.config import Settings


def _parts():
    return SessionCookieCodec("guard-secret"), SessionStore()


def test_no_cookie_is_anonymous():
    codec, store = _parts()
    assert resolve_identity(None, codec, store) is ANONYMOUS
    assert resolve_identity("", codec, store) is ANONYMOUS


def test_live_session_is_authenticated():
    codec, store = _parts()
    value = codec.encode(store.create(42))
    assert resolve_identity(value, codec, store) == Authenticated(42)


def test_undecodable_cookie_is_anonymous():
    codec, store = _parts()
    value = codec.encode(store.create(42))
    assert resolve_identity(value[:-2], codec, store) is ANONYMOUS
    assert resolve_identity("garbage", codec, store) is ANONYMOUS


def test_dead_session_is_anonymous():
    codec, store = _parts()
    token = store.create(42)
    value = codec.encode(token)
    store.invalidate(token)
    assert resolve_identity(value, codec, store) is ANONYMOUS


def test_well_formed_cookie_for_unknown_token_is_anonymous():
    codec, store = _parts()
    assert resolve_identity(codec.encode("never-issued"), codec, store) is ANONYMOUS


def test_safe_next_only_allows_local_paths():
    assert safe_next("/form/3") == "/form/3"
    assert safe_next("/?a=1") == "/?a=1"
    assert safe_next("") == "/"
    assert safe_next("https://evil.example/") == "/"
    assert safe_next("//evil.example/") == "/"
    assert safe_next("/\\evil.example") == "/"


def test_cookie_settings():
    s = Settings(secret_key="x")
    out = cookie_settings(s)
    assert out["httponly"] is True
    assert out["samesite"] == "strict"
    assert out["secure"] is False
    assert "max_age" not in out
    out = cookie_settings(Settings(secret_key="x", cookie_secure=True, session_max_age=3600))
    assert out["secure"] is True
    assert out["max_age"] == 3600

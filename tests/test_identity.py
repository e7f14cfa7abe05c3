from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from smartdoc.api.exceptions import AuthFailure, RegistrationError
from smartdoc.services.auth_service import MemoryAuthService
from smartdoc.services.identity import IdentityProviderFactory, MemoryIdentityProvider, MemoryUserDirectory
from smartdoc.services.identity import supabase_identity


@pytest.fixture
def directory() -> MemoryUserDirectory:
    return MemoryUserDirectory()


def test_register_and_authenticate(directory):
    user = directory.register("Ana@Example.com", "secret1", "Ana")

    session = directory.authenticate("ana@example.com", "secret1")

    assert user == {"id": session.identity, "email": "ana@example.com", "name": "Ana"}
    assert directory.verify(session.access_token) == session.identity


@pytest.mark.parametrize("email,password", [("not-an-email", "secret1"), ("ana@example.com", "short")])
def test_register_rejects_invalid_credentials(directory, email, password):
    with pytest.raises(RegistrationError):
        directory.register(email, password)


def test_register_rejects_duplicates(directory):
    directory.register("ana@example.com", "secret1")
    with pytest.raises(RegistrationError):
        directory.register("ana@example.com", "secret2")


def test_wrong_password_is_auth_failure(directory):
    directory.register("ana@example.com", "secret1")
    with pytest.raises(AuthFailure):
        directory.authenticate("ana@example.com", "wrong1")


def test_refresh_rotates_token_for_same_identity(directory):
    directory.register("ana@example.com", "secret1")
    session = directory.authenticate("ana@example.com", "secret1")

    refreshed = directory.refresh(session)

    assert refreshed.same_identity(session)
    assert directory.verify(session.access_token) is None
    assert directory.verify(refreshed.access_token) == session.identity


@pytest.mark.asyncio
async def test_memory_provider_notifies_subscribers(directory):
    directory.register("ana@example.com", "secret1")
    provider = MemoryIdentityProvider(directory)
    seen = []
    subscription = provider.on_session_change(seen.append)

    session = await provider.establish_session("ana@example.com", "secret1")
    await provider.end_session()
    subscription.unsubscribe()
    subscription.unsubscribe()
    await provider.establish_session("ana@example.com", "secret1")

    assert seen == [session, None]
    assert directory.verify(session.access_token) is None


@pytest.mark.asyncio
async def test_memory_auth_service_checks_tokens(directory):
    service = MemoryAuthService(directory)
    user = await service.register("ana@example.com", "secret1")
    session = directory.authenticate("ana@example.com", "secret1")

    assert await service.verify_token(session.access_token) == user["id"]
    with pytest.raises(AuthFailure):
        await service.verify_token("forged")


def test_factory_creates_memory_provider(directory):
    provider = IdentityProviderFactory.create("memory", directory=directory)
    assert isinstance(provider, MemoryIdentityProvider)
    assert provider.directory is directory


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError):
        IdentityProviderFactory.create("ldap")


def test_factory_requires_supabase_settings():
    with pytest.raises(ValueError):
        IdentityProviderFactory.create("supabase", supabase_url=None)


@pytest.mark.asyncio
async def test_supabase_provider_maps_sdk_sessions(monkeypatch):
    raw_session = SimpleNamespace(
        access_token="jwt-token",
        user=SimpleNamespace(id="user-1", email="ana@example.com")
    )
    sdk = Mock()
    sdk.auth.sign_in_with_password.return_value = SimpleNamespace(session=raw_session)
    sdk.auth.get_session.return_value = None
    monkeypatch.setattr(supabase_identity, "create_client", Mock(return_value=sdk))

    provider = supabase_identity.SupabaseIdentityProvider(
        "https://test.supabase.co", "anon-key", "http://backend.test"
    )
    session = await provider.establish_session("ana@example.com", "secret1")

    assert session.identity == "user-1"
    assert session.access_token == "jwt-token"
    assert await provider.current_session() is None

    seen = []
    provider.on_session_change(seen.append)
    listener = sdk.auth.on_auth_state_change.call_args.args[0]
    listener("SIGNED_OUT", None)
    listener("TOKEN_REFRESHED", raw_session)
    assert seen[0] is None
    assert seen[1].access_token == "jwt-token"


@pytest.mark.asyncio
async def test_supabase_sign_in_error_is_auth_failure(monkeypatch):
    sdk = Mock()
    sdk.auth.sign_in_with_password.side_effect = RuntimeError("Invalid login credentials")
    monkeypatch.setattr(supabase_identity, "create_client", Mock(return_value=sdk))
    provider = supabase_identity.SupabaseIdentityProvider(
        "https://test.supabase.co", "anon-key", "http://backend.test"
    )

    with pytest.raises(AuthFailure):
        await provider.establish_session("ana@example.com", "wrong")

import asyncio

import httpx
import pytest
from cryptography.fernet import Fernet
from sqlalchemy.exc import SQLAlchemyError

from offline_orders.domain.tokens import TokenManager, TokenPair, TokenRepository
from offline_orders.exceptions import UpstreamAuthError
from offline_orders.models import TOKEN_STORE_KEY, Cafe24Token


class FailingRepository:
    """Token store whose writes always fail"""

    def load(self):
        return None

    def save(self, pair):
        raise SQLAlchemyError("disk full")


def _manager(repository, http_client):
    return TokenManager(
        mall_id="testmall",
        client_id="client-id",
        client_secret="client-secret",
        repository=repository,
        http_client=http_client,
    )


class TestTokenRepository:
    def test_empty_store(self, session_factory):
        assert TokenRepository(session_factory).load() is None

    def test_save_then_load(self, session_factory):
        repo = TokenRepository(session_factory)
        repo.save(TokenPair("a1", "r1"))
        repo.save(TokenPair("a2", "r2"))

        pair = repo.load()
        assert (pair.access_token, pair.refresh_token) == ("a2", "r2")
        assert pair.updated_at is not None

        db = session_factory()
        assert db.query(Cafe24Token).count() == 1
        db.close()

    def test_tokens_encrypted_at_rest(self, session_factory):
        repo = TokenRepository(session_factory, Fernet.generate_key().decode())
        repo.save(TokenPair("secret-access", "secret-refresh"))

        db = session_factory()
        row = db.query(Cafe24Token).filter(Cafe24Token.key == TOKEN_STORE_KEY).one()
        assert row.access_token != "secret-access"
        db.close()

        assert repo.load().access_token == "secret-access"

    def test_plaintext_row_readable_after_enabling_encryption(self, session_factory):
        TokenRepository(session_factory).save(TokenPair("plain-access", "plain-refresh"))
        repo = TokenRepository(session_factory, Fernet.generate_key().decode())
        assert repo.load().refresh_token == "plain-refresh"


class TestTokenManagerLoad:
    def test_configured_tokens_used_and_persisted_when_store_empty(self, session_factory):
        repo = TokenRepository(session_factory)
        manager = _manager(repo, http_client=None)

        manager.load("env-access", "env-refresh")

        assert manager.access_token == "env-access"
        assert repo.load().refresh_token == "env-refresh"

    def test_stored_tokens_win_over_configured(self, session_factory):
        repo = TokenRepository(session_factory)
        repo.save(TokenPair("db-access", "db-refresh"))
        manager = _manager(repo, http_client=None)

        manager.load("env-access", "env-refresh")

        assert manager.access_token == "db-access"

    def test_no_tokens_anywhere(self, session_factory):
        manager = _manager(TokenRepository(session_factory), http_client=None)
        assert manager.load(None, None) is None
        assert manager.access_token is None

    def test_invalidate(self, session_factory):
        manager = _manager(TokenRepository(session_factory), http_client=None)
        manager.load("env-access", "env-refresh")
        manager.invalidate()
        assert manager.access_token == "INVALID_TOKEN_TEST"
        assert manager.get().refresh_token == "env-refresh"


class TestTokenManagerRefresh:
    def test_refresh_success_updates_memory_and_store(self, session_factory, fake_cafe24):
        fake = fake_cafe24()
        repo = TokenRepository(session_factory)

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(repo, http_client)
                manager.load("access-0", "refresh-0")
                pair = await manager.refresh()
                return manager, pair

        manager, pair = asyncio.run(run())

        assert pair.access_token == "access-1"
        assert manager.access_token == "access-1"
        assert repo.load().refresh_token == "refresh-1"
        assert manager.refresh_count == 1

        request = fake.token_calls[0]
        assert request.method == "POST"
        assert request.headers["authorization"].startswith("Basic ")
        body = request.content.decode()
        assert "grant_type=refresh_token" in body
        assert "refresh_token=refresh-0" in body

    def test_store_write_failure_keeps_new_token(self, fake_cafe24, caplog):
        fake = fake_cafe24()

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(FailingRepository(), http_client)
                manager.load("access-0", "refresh-0")
                await manager.refresh()
                return manager

        manager = asyncio.run(run())

        assert manager.access_token == "access-1"
        assert "Token save failed" in caplog.text

    def test_rejected_exchange_raises(self, session_factory, fake_cafe24):
        fake = fake_cafe24(token_response=httpx.Response(400, json={"error": "invalid_grant"}))

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(TokenRepository(session_factory), http_client)
                manager.load("access-0", "refresh-0")
                with pytest.raises(UpstreamAuthError) as exc_info:
                    await manager.refresh()
                return manager, exc_info.value

        manager, error = asyncio.run(run())

        assert error.status == 400
        assert "invalid_grant" in error.body
        assert manager.access_token == "access-0"

    def test_response_without_tokens_raises(self, session_factory, fake_cafe24):
        fake = fake_cafe24(token_response=httpx.Response(200, json={"expires_at": "soon"}))

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(TokenRepository(session_factory), http_client)
                manager.load("access-0", "refresh-0")
                with pytest.raises(UpstreamAuthError):
                    await manager.refresh()

        asyncio.run(run())

    def test_refresh_without_refresh_token(self, session_factory, fake_cafe24):
        fake = fake_cafe24()

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(TokenRepository(session_factory), http_client)
                with pytest.raises(UpstreamAuthError):
                    await manager.refresh()

        asyncio.run(run())
        assert fake.token_calls == []

    def test_concurrent_refreshes_exchange_once(self, session_factory, fake_cafe24):
        fake = fake_cafe24()

        async def run():
            async with fake.http_client() as http_client:
                manager = _manager(TokenRepository(session_factory), http_client)
                manager.load("access-0", "refresh-0")
                pairs = await asyncio.gather(
                    *(manager.refresh(stale_access_token="access-0") for _ in range(5))
                )
                return manager, pairs

        manager, pairs = asyncio.run(run())

        assert len(fake.token_calls) == 1
        assert manager.refresh_count == 1
        assert {pair.access_token for pair in pairs} == {"access-1"}

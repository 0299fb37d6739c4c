"""
Name: Database Pool Tests

Responsibilities:
  - Test pool lifecycle (init, get, close)
  - Offline unit tests (no real DB)

Notes:
  - ConnectionPool se importa de forma lazy: se parchea en psycopg_pool
"""

from unittest.mock import MagicMock, patch

import pytest

from subject_registry.infrastructure.db import (
    PoolAlreadyInitializedError,
    PoolNotInitializedError,
    close_pool,
    get_pool,
    init_pool,
)


@pytest.fixture(autouse=True)
def _clean_pool():
    close_pool()
    yield
    close_pool()


@pytest.mark.unit
class TestPoolLifecycle:
    def test_init_pool_creates_pool(self):
        with patch("psycopg_pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            result = init_pool("postgresql://test", min_size=2, max_size=10)

            MockPool.assert_called_once()
            assert MockPool.call_args.kwargs["min_size"] == 2
            assert result is mock_pool
            assert get_pool() is mock_pool

    def test_init_pool_twice_raises_error(self):
        with patch("psycopg_pool.ConnectionPool"):
            init_pool("postgresql://test", min_size=2, max_size=10)

            with pytest.raises(PoolAlreadyInitializedError):
                init_pool("postgresql://test", min_size=2, max_size=10)

    def test_get_pool_without_init_raises_error(self):
        with pytest.raises(PoolNotInitializedError):
            get_pool()

    def test_close_pool_clears_singleton(self):
        with patch("psycopg_pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool

            init_pool("postgresql://test", min_size=2, max_size=10)
            close_pool()

            mock_pool.close.assert_called_once()
            with pytest.raises(PoolNotInitializedError):
                get_pool()

    def test_close_pool_is_idempotent(self):
        close_pool()
        close_pool()


@pytest.mark.unit
class TestConnectionSetup:
    def test_configure_sets_utc_and_timeout(self):
        from subject_registry.infrastructure.db.pool import _configure_connection

        conn = MagicMock()
        _configure_connection(conn)

        statements = [c.args[0] for c in conn.execute.call_args_list]
        assert "SET TIME ZONE 'UTC'" in statements
        assert any(s.startswith("SET statement_timeout = ") for s in statements)
        conn.commit.assert_called_once()

    def test_init_pool_passes_configure_hook(self):
        from subject_registry.infrastructure.db.pool import _configure_connection

        with patch("psycopg_pool.ConnectionPool") as MockPool:
            init_pool("postgresql://test", min_size=1, max_size=2)

            assert MockPool.call_args.kwargs["configure"] is _configure_connection

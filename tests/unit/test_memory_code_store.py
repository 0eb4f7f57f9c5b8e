"""Unit tests for MemoryCodeStore and code generation."""

from __future__ import annotations

import pytest

from src.interfaces.code_store import CODE_MAX, CODE_MIN
from src.providers.code_store.memory_code_store import MemoryCodeStore
from tests.conftest import FakeClock


class TestGenerate:
    def test_codes_are_six_digit_strings_in_range(self, code_store: MemoryCodeStore) -> None:
        for _ in range(200):
            code = code_store.generate()
            assert len(code) == 6
            assert code.isdigit()
            assert CODE_MIN <= int(code) <= CODE_MAX


class TestMemoryCodeStore:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, code_store: MemoryCodeStore) -> None:
        assert await code_store.get("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, code_store: MemoryCodeStore) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)

        assert await code_store.get("alex@example.com") == "123456"

    @pytest.mark.asyncio
    async def test_get_does_not_consume(self, code_store: MemoryCodeStore) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)
        await code_store.get("alex@example.com")

        assert await code_store.get("alex@example.com") == "123456"

    @pytest.mark.asyncio
    async def test_email_key_is_case_insensitive(self, code_store: MemoryCodeStore) -> None:
        await code_store.set("Alex@Example.com", "123456", ttl_minutes=10)

        assert await code_store.get("alex@example.com") == "123456"

    @pytest.mark.asyncio
    async def test_new_code_replaces_previous(self, code_store: MemoryCodeStore) -> None:
        await code_store.set("alex@example.com", "111111", ttl_minutes=10)
        await code_store.set("alex@example.com", "222222", ttl_minutes=10)

        assert await code_store.get("alex@example.com") == "222222"
        assert len(code_store) == 1

    @pytest.mark.asyncio
    async def test_live_just_before_ttl(self, code_store: MemoryCodeStore, clock: FakeClock) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)
        clock.advance(minutes=10, seconds=-1)

        assert await code_store.get("alex@example.com") == "123456"

    @pytest.mark.asyncio
    async def test_live_at_exact_ttl(self, code_store: MemoryCodeStore, clock: FakeClock) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)
        clock.advance(minutes=10)

        assert await code_store.get("alex@example.com") == "123456"

    @pytest.mark.asyncio
    async def test_expired_just_after_ttl(self, code_store: MemoryCodeStore, clock: FakeClock) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)
        clock.advance(minutes=10, microseconds=1)

        assert await code_store.get("alex@example.com") is None

    @pytest.mark.asyncio
    async def test_lapsed_entries_are_purged_on_miss(
        self, code_store: MemoryCodeStore, clock: FakeClock
    ) -> None:
        await code_store.set("alex@example.com", "111111", ttl_minutes=10)
        await code_store.set("jo@example.com", "222222", ttl_minutes=10)
        clock.advance(minutes=11)

        await code_store.get("alex@example.com")

        assert len(code_store) == 0

    @pytest.mark.asyncio
    async def test_delete_removes_code(self, code_store: MemoryCodeStore) -> None:
        await code_store.set("alex@example.com", "123456", ttl_minutes=10)
        await code_store.delete("ALEX@example.com")

        assert await code_store.get("alex@example.com") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, code_store: MemoryCodeStore) -> None:
        await code_store.delete("nobody@example.com")  # should not raise

    @pytest.mark.asyncio
    async def test_capacity_evicts_oldest(self, clock: FakeClock) -> None:
        store = MemoryCodeStore(max_size=2, clock=clock)
        await store.set("a@example.com", "111111", ttl_minutes=10)
        await store.set("b@example.com", "222222", ttl_minutes=10)
        await store.set("c@example.com", "333333", ttl_minutes=10)

        assert len(store) == 2
        assert await store.get("c@example.com") == "333333"

    def test_provider_name(self, code_store: MemoryCodeStore) -> None:
        assert code_store.get_provider_name() == "MemoryCodeStore"

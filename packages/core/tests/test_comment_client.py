"""Tests for the comment sync client and its session memo."""

import asyncio

import pytest

from auditor_core.comment_client import CommentSyncClient, threads_from_records
from auditor_core.comments import Author
from auditor_core.context import SessionContext
from auditor_core.errors import BackendError, NetworkError, ServiceError, StaleFileError
from auditor_service.models import CommentRecord


def _records():
    return {
        3: [CommentRecord(id=1, body="one", author="ana"), CommentRecord(id=2, body="two", author="bo")],
        9: [],
    }


def test_threads_from_records_skips_empty_lines():
    threads = threads_from_records(_records())
    assert list(threads) == [3]
    assert [c.id for c in threads[3].comments] == [1, 2]
    assert threads[3].comments[1].author == Author("bo")


def test_threads_from_records_skips_repeated_id():
    records = {
        3: [
            CommentRecord(id=1, body="one", author="ana"),
            CommentRecord(id=1, body="one again", author="ana"),
            CommentRecord(id=2, body="two", author="bo"),
        ],
        5: [CommentRecord(id=3, body="three", author="cy")],
    }

    threads = threads_from_records(records)

    assert [c.id for c in threads[3].comments] == [1, 2]
    assert threads[3].comments[0].body == "one"
    assert [c.id for c in threads[5].comments] == [3]


class TestFetchComments:
    @pytest.mark.asyncio()
    async def test_repeated_id_does_not_fail_the_load(self, service):
        service.fetch_comments.return_value = {
            2: [CommentRecord(id=7, body="a", author="ana"), CommentRecord(id=7, body="a", author="ana")]
        }
        client = CommentSyncClient(service, SessionContext())

        threads = await client.fetch_comments("a.cpp")

        assert [c.id for c in threads[2].comments] == [7]
        assert client.is_loaded("a.cpp")
        assert await client.fetch_comments("a.cpp") is None
        service.fetch_comments.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_first_fetch_loads_threads(self, service):
        service.fetch_comments.return_value = _records()
        client = CommentSyncClient(service, SessionContext())

        threads = await client.fetch_comments("a.cpp")

        assert list(threads) == [3]
        assert client.is_loaded("a.cpp")

    @pytest.mark.asyncio()
    async def test_second_fetch_is_memoized(self, service):
        client = CommentSyncClient(service, SessionContext())

        await client.fetch_comments("a.cpp")
        again = await client.fetch_comments("a.cpp")

        assert again is None
        service.fetch_comments.assert_awaited_once_with("a.cpp")

    @pytest.mark.asyncio()
    async def test_memo_is_per_file(self, service):
        client = CommentSyncClient(service, SessionContext())

        await client.fetch_comments("a.cpp")
        await client.fetch_comments("b.cpp")

        assert service.fetch_comments.await_count == 2

    @pytest.mark.asyncio()
    async def test_failed_fetch_is_retried_next_time(self, service):
        service.fetch_comments.side_effect = [NetworkError("down"), _records()]
        client = CommentSyncClient(service, SessionContext())

        with pytest.raises(NetworkError):
            await client.fetch_comments("a.cpp")
        assert not client.is_loaded("a.cpp")

        threads = await client.fetch_comments("a.cpp")
        assert list(threads) == [3]

    @pytest.mark.asyncio()
    async def test_concurrent_fetch_only_loads_once(self, service):
        gate = asyncio.Event()

        async def _slow(file_name):
            await gate.wait()
            return _records()

        service.fetch_comments.side_effect = _slow
        client = CommentSyncClient(service, SessionContext())

        first = asyncio.ensure_future(client.fetch_comments("a.cpp"))
        await asyncio.sleep(0)
        second = await client.fetch_comments("a.cpp")
        gate.set()

        assert second is None
        assert list(await first) == [3]
        service.fetch_comments.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_reset_clears_memo(self, service):
        context = SessionContext()
        client = CommentSyncClient(service, context)

        await client.fetch_comments("a.cpp")
        context.reset()
        await client.fetch_comments("a.cpp")

        assert service.fetch_comments.await_count == 2


class TestCreateComment:
    @pytest.mark.asyncio()
    async def test_uses_service_id(self, service):
        service.create_comment.return_value = 42
        client = CommentSyncClient(service, SessionContext())

        comment = await client.create_comment("a.cpp", 3, "check bounds", Author("ana"))

        service.create_comment.assert_awaited_once_with("a.cpp", 3, "check bounds", "ana")
        assert comment.id == 42
        assert comment.body == "check bounds"
        assert comment.saved_body == "check bounds"

    @pytest.mark.asyncio()
    async def test_failure_raises_backend_error(self, service):
        service.create_comment.side_effect = NetworkError("down")
        client = CommentSyncClient(service, SessionContext())

        with pytest.raises(BackendError):
            await client.create_comment("a.cpp", 3, "x", Author("ana"))


class TestDeleteComment:
    @pytest.mark.asyncio()
    async def test_success(self, service):
        client = CommentSyncClient(service, SessionContext())

        assert await client.delete_comment("a.cpp", 3, 1) is True
        service.delete_comment.assert_awaited_once_with("a.cpp", 3, 1)

    @pytest.mark.asyncio()
    async def test_failure_is_logged_not_raised(self, service, caplog):
        service.delete_comment.side_effect = ServiceError("gone", 400)
        client = CommentSyncClient(service, SessionContext())

        assert await client.delete_comment("a.cpp", 3, 1) is False
        assert "Could not delete comment" in caplog.text


class TestSessionContext:
    def test_activate_issues_fresh_tokens(self):
        context = SessionContext()
        first = context.activate("a.cpp")
        second = context.activate("a.cpp")

        assert second != first
        assert context.is_current("a.cpp", second)
        assert not context.is_current("a.cpp", first)

    def test_ensure_current_raises_for_other_file(self):
        context = SessionContext()
        token = context.activate("a.cpp")
        context.activate("b.cpp")

        with pytest.raises(StaleFileError) as exc_info:
            context.ensure_current("a.cpp", token)
        assert exc_info.value.active_file == "b.cpp"

    def test_reset_makes_old_tokens_stale(self):
        context = SessionContext()
        token = context.activate("a.cpp")

        context.reset()

        assert context.active_file is None
        assert not context.is_current("a.cpp", token)
        assert context.activate("a.cpp") != token

"""Tests for illustration persistence."""

import pytest
from sqlalchemy.exc import OperationalError

from scholarcast.models.cascade import IllustrationResult
from scholarcast.services.storage import IllustrationStore, illustration_url

PNG = b"\x89PNG\r\n\x1a\nfake"


def make_result(data: bytes = PNG) -> IllustrationResult:
    return IllustrationResult(image_bytes=data, mime_type="image/png", prompt_used="A cell dividing")


def persist_kwargs(**overrides):
    kwargs = dict(
        module_id="mod-1",
        locale="en",
        style="textbook",
        visual_style="anime",
        result=make_result(),
        provider="runware",
        model="runware:97@1",
        checksum="a" * 64,
        anchor={"section": 1},
        metadata={"source": "api"},
    )
    kwargs.update(overrides)
    return kwargs


def test_illustration_url():
    assert illustration_url(7) == "/api/illustrations/7"


@pytest.mark.asyncio
async def test_persist_and_get(db_session):
    store = IllustrationStore(db_session)

    persisted = await store.persist(**persist_kwargs())

    assert persisted.id > 0
    assert persisted.image_url == f"/api/illustrations/{persisted.id}"
    assert persisted.updated_existing == False

    record = await store.get(persisted.id)
    assert record.image_data == PNG
    assert record.mime_type == "image/png"
    assert record.anchor == {"section": 1}
    assert record.metadata_json == {"source": "api"}
    assert record.prompt_summary == "A cell dividing"


@pytest.mark.asyncio
async def test_same_checksum_updates_in_place(db_session):
    store = IllustrationStore(db_session)

    first = await store.persist(**persist_kwargs())
    second = await store.persist(**persist_kwargs(result=make_result(b"newer"), provider="qwen"))

    assert second.id == first.id
    assert second.updated_existing == True
    record = await store.get(first.id)
    assert record.image_data == b"newer"
    assert record.provider == "qwen"


@pytest.mark.asyncio
async def test_different_visual_style_is_a_new_row(db_session):
    store = IllustrationStore(db_session)

    first = await store.persist(**persist_kwargs())
    second = await store.persist(**persist_kwargs(visual_style="photorealistic"))

    assert second.id != first.id


@pytest.mark.asyncio
async def test_get_missing(db_session):
    assert await IllustrationStore(db_session).get(999) is None


@pytest.mark.asyncio
async def test_database_error_returns_none(db_session, monkeypatch):
    store = IllustrationStore(db_session)

    async def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", broken_commit)

    assert await store.persist(**persist_kwargs()) is None

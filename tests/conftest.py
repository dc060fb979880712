"""Shared fixtures: a throwaway SQLite store with an in-memory notifier."""

import asyncio

import pytest

from db.session import build_engine, build_session_factory, init_models
from factories import STORAGE_KEY
from reports.notifier import InMemoryChangeNotifier, notifier_topic
from reports.store import ScoreRecordStore


@pytest.fixture()
def engine(tmp_path):
    # Unpooled so each asyncio.run() opens its own connections
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ecobrowse.db'}", pooled=False)
    asyncio.run(init_models(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def notifier():
    return InMemoryChangeNotifier(notifier_topic(STORAGE_KEY))


@pytest.fixture()
def store(session_factory, notifier):
    return ScoreRecordStore(session_factory, notifier, STORAGE_KEY)


@pytest.fixture()
def events(notifier):
    received = []
    notifier.subscribe(received.append)
    return received

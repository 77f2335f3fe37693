from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from argumerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCollectionUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from argumerge.domain.model import EntityType
from tests.helpers.debate import make_claim, make_tag

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyCollectionUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_require_an_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyCollectionUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_commits(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCollectionUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tags.add(make_tag())
        uow.repositories.for_type(EntityType.CLAIM).add(make_claim())
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert [tag.id for tag in uow.repositories.tags.list_all()] == ["tag-1"]
        assert len(uow.repositories.claims.list_all()) == 1


def test_unit_of_work_rolls_back_on_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCollectionUnitOfWork],
) -> None:
    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.tags.add(make_tag())
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.tags.list_all() == []


def test_uncommitted_changes_are_discarded(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCollectionUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.tags.add(make_tag())

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.tags.list_all() == []

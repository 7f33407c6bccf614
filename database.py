from typing import Iterable, List, Optional
from sqlalchemy import Engine, create_engine, delete, func, select
from sqlalchemy.engine.url import make_url

from config import load_database_url
from models import Base, Case
from schemas import CaseRecord


def create_db_engine(database_url: Optional[str] = None, logging=False) -> Engine:
    """
    Создаёт синхронный движок для служебных скриптов.
    Асинхронные драйверы заменяются на синхронные.
    """

    url = make_url(database_url or load_database_url())
    if url.drivername == 'postgresql+asyncpg':
        url = url.set(drivername='postgresql')
    elif url.drivername == 'sqlite+aiosqlite':
        url = url.set(drivername='sqlite')

    return create_engine(url, echo=logging)


def init_db(engine: Engine) -> None:
    """
    Создаёт таблицу cases, если её ещё нет.
    """

    Base.metadata.create_all(engine)


def save_cases(engine: Engine, cases: Iterable[CaseRecord]) -> List[int]:
    """
    Записывает обращения в базу и возвращает их id.
    """

    ids = []
    with engine.begin() as conn:
        for case in cases:
            result = conn.execute(
                Case.__table__.insert().values(
                    message=case.message,
                    status=case.status
                )
            )
            ids.append(result.inserted_primary_key[0])

    return ids


def clear_cases(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(delete(Case.__table__))


def count_cases(engine: Engine) -> int:
    with engine.connect() as conn:
        result = conn.execute(select(func.count()).select_from(Case.__table__))
        count = result.scalar()

        return count

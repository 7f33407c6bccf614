from typing import List, Optional
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy import URL, Select, select, text
from sqlalchemy.engine.url import make_url

from constants import DB_POOL_SIZE
from models import Case
from schemas import CaseRecord


SAMPLE_CASES = [
    CaseRecord(id=1, message="Test", status="Open"),
    CaseRecord(id=2, message="Test2", status="Closed"),
    CaseRecord(
        id=3,
        message="A neighbour keeps calling at night demanding 500 pesos "
                "for a debt I never had",
        status="Open"),
]


class AsyncCaseFetcher:
    def __init__(self,
                 database_url: str,
                 pool_size: int = DB_POOL_SIZE,
                 order_by_id: bool = False):
        url: URL = make_url(database_url)
        if url.drivername == 'postgresql':
            url = url.set(drivername='postgresql+asyncpg')

        engine_options = {"echo": False}
        # SQLite пулы не принимают размер пула
        if url.get_backend_name() != 'sqlite':
            engine_options["pool_size"] = pool_size
            engine_options["max_overflow"] = 0

        self.engine = create_async_engine(url, **engine_options)
        self.async_session = async_sessionmaker(
            self.engine, expire_on_commit=False)
        self.order_by_id = order_by_id

    async def check_connection(self) -> None:
        """
        Проверяет, что база данных доступна.
        """

        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    def build_page_query(self, offset: int, limit: int) -> Select:
        """
        Без order_by порядок строк определяет сама база.
        """

        statement = select(Case)
        if self.order_by_id:
            statement = statement.order_by(Case.id)
        return statement.limit(limit).offset(offset)

    async def fetch_page(self, offset: int, limit: int) -> List[CaseRecord]:
        """
        Получает не более limit обращений, пропуская первые offset.
        """

        statement = self.build_page_query(offset, limit)

        async with self.async_session() as session:
            result = await session.execute(statement)
            rows = result.scalars().all()

            return [CaseRecord.model_validate(row) for row in rows]

    async def close(self) -> None:
        """
        Закрывает соединения с БД.
        """

        await self.engine.dispose()


class MockCaseFetcher:
    """
    Источник обращений в памяти, без базы данных.
    """

    def __init__(self, cases: Optional[List[CaseRecord]] = None):
        self.cases = list(SAMPLE_CASES if cases is None else cases)
        self.requests = []

    async def check_connection(self) -> None:
        return None

    async def fetch_page(self, offset: int, limit: int) -> List[CaseRecord]:
        self.requests.append((offset, limit))
        return self.cases[offset:offset + limit]

    async def close(self) -> None:
        return None

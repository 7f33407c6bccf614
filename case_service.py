from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
from jinja2 import TemplateError

from constants import (CASE_TABLE_TEMPLATE, CASES_TEMPLATE, INDEX_TEMPLATE,
                       PAGE_SIZE, TIMESTAMP_FORMAT)
from renderer import TemplateRenderer
from schemas import CaseRecord, CaseTableContext, Pagination


class CaseSource(Protocol):
    async def fetch_page(self, offset: int, limit: int) -> List[CaseRecord]:
        ...


def current_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class CaseService:
    def __init__(self,
                 renderer: TemplateRenderer,
                 fetcher: CaseSource,
                 clock: Callable[[], str] = current_timestamp):
        self.renderer = renderer
        self.fetcher = fetcher
        self.clock = clock

    def _render(self,
                name: str,
                context: Optional[Dict[str, Any]] = None) -> Tuple[int, str]:
        """
        Рендерит шаблон.
        Ошибка шаблона превращается в ответ 500 с текстом без HTML.
        """

        try:
            return 200, self.renderer.render(name, context)
        except TemplateError as e:
            print(f"Template error: {e}")
            return 500, "Template error"

    async def _fetch_cases(self, offset: int) -> List[CaseRecord]:
        """
        Один запрос к хранилищу.
        Ошибки не пробрасываются: вместо них отдаётся пустой список.
        """

        try:
            return await self.fetcher.fetch_page(offset=offset, limit=PAGE_SIZE)
        except Exception as e:
            print(f"Case fetching error: {e}")
            return []

    def render_index(self) -> Tuple[int, str]:
        return self._render(INDEX_TEMPLATE, {"now": self.clock()})

    def render_cases(self) -> Tuple[int, str]:
        return self._render(CASES_TEMPLATE)

    async def render_case_table(self, page: Optional[int] = None) -> Tuple[int, str]:
        """
        Рендерит страницу таблицы обращений.

        Номер страницы приводится к неотрицательному, за один вызов
        читается не более PAGE_SIZE строк, ссылка на следующую страницу
        содержит page + 1.
        """

        pagination = Pagination.from_query(page)
        cases = await self._fetch_cases(pagination.offset(PAGE_SIZE))

        context = CaseTableContext(
            cases=cases[:PAGE_SIZE],
            page=pagination.page,
            url=pagination.next_page_url(),
        )

        return self._render(CASE_TABLE_TEMPLATE, context.model_dump())

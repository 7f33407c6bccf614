from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CaseRecord(BaseModel):
    """
    Одна запись из таблицы cases.
    Сервис только читает эти записи, создаёт их хранилище.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    message: str
    status: str = Field(..., description="Статус обращения, например Open или Closed")


class Pagination(BaseModel):
    """
    Номер страницы для таблицы обращений.
    Существует только в рамках одного запроса.
    """

    page: int = Field(default=0, ge=0)

    @classmethod
    def from_query(cls, page: Optional[int]) -> "Pagination":
        """
        Отрицательные значения молча приводятся к нулю,
        отсутствующий параметр означает первую страницу.
        """

        return cls(page=max(0, page or 0))

    def offset(self, page_size: int) -> int:
        return self.page * page_size

    def next_page_url(self) -> str:
        return f"/casetable?page={self.page + 1}"


class CaseTableContext(BaseModel):
    """
    Контекст шаблона components/casetable.html.
    """

    cases: List[CaseRecord]
    page: int
    url: str

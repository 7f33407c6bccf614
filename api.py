import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from case_fetcher import AsyncCaseFetcher, MockCaseFetcher
from case_service import CaseService, CaseSource
from config import Settings, load_settings
from renderer import TemplateRenderer, load_templates_or_exit


def _to_response(status: int, body: str) -> Response:
    if status == 200:
        return HTMLResponse(body, status_code=status)
    return PlainTextResponse(body, status_code=status)


def _create_fetcher(settings: Settings) -> CaseSource:
    if settings.cases_source == "mock":
        return MockCaseFetcher()

    return AsyncCaseFetcher(
        settings.database_url,
        pool_size=settings.db_pool_size,
        order_by_id=settings.cases_order_by_id,
    )


def create_app(settings: Optional[Settings] = None,
               renderer: Optional[TemplateRenderer] = None,
               fetcher: Optional[CaseSource] = None) -> FastAPI:
    """
    Собирает приложение.

    Шаблоны разбираются здесь, до запуска сервера: при ошибке процесс
    завершается. Рендерер и источник обращений можно передать снаружи.
    """

    settings = settings or load_settings()
    renderer = renderer or load_templates_or_exit(settings.templates_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Жизненный цикл сервера.
        При старте проверяет базу, при выключении закрывает соединения.
        """

        print("Starting server")
        case_fetcher = fetcher or _create_fetcher(settings)

        try:
            await case_fetcher.check_connection()
        except Exception as e:
            print(f"Database is unavailable: {e}")

        app.state.case_service = CaseService(renderer, case_fetcher)

        yield

        print("Stopping server")
        await case_fetcher.close()

    app = FastAPI(title='Case board', lifespan=lifespan)

    @app.get("/")
    async def index(request: Request) -> Response:
        """
        Главная страница с текущим временем сервера.
        """

        return _to_response(*request.app.state.case_service.render_index())

    @app.get("/cases")
    async def cases(request: Request) -> Response:
        """
        Страница со списком обращений. Таблица подгружается отдельно.
        """

        return _to_response(*request.app.state.case_service.render_cases())

    @app.get("/casetable")
    async def case_table(request: Request, page: Optional[int] = None) -> Response:
        """
        Фрагмент таблицы обращений, по 10 строк на страницу.
        """

        service: CaseService = request.app.state.case_service
        return _to_response(*await service.render_case_table(page))

    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    return app


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)

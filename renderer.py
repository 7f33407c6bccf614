import os
import sys
from typing import Any, Dict, Optional
from jinja2 import (Environment, FileSystemLoader, StrictUndefined,
                    TemplateError, select_autoescape)


class TemplateLoadError(Exception):
    pass


class TemplateRenderer:
    def __init__(self, templates_dir: str):
        self.templates_dir = templates_dir
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(["html", "sql"]),
            undefined=StrictUndefined,
        )

    def load_all(self) -> int:
        """
        Разбирает все шаблоны из папки один раз при старте.
        Возвращает количество загруженных шаблонов.
        """

        if not os.path.isdir(self.templates_dir):
            raise TemplateLoadError(
                f"Templates directory not found: {self.templates_dir}")

        names = self.env.list_templates()
        if not names:
            raise TemplateLoadError(
                f"No templates found in {self.templates_dir}")

        for name in names:
            try:
                self.env.get_template(name)
            except TemplateError as e:
                raise TemplateLoadError(f"{name}: {e}") from e

        return len(names)

    def render(self, name: str, context: Optional[Dict[str, Any]] = None) -> str:
        template = self.env.get_template(name)
        return template.render(context or {})


def load_templates_or_exit(templates_dir: str) -> TemplateRenderer:
    """
    Создаёт рендерер и загружает шаблоны.
    При любой ошибке разбора процесс завершается с кодом 1.
    """

    renderer = TemplateRenderer(templates_dir)
    try:
        renderer.load_all()
    except TemplateLoadError as e:
        print(f"Parsing error(s): {e}")
        sys.exit(1)

    return renderer

# infrastructure/rendering/jinja_page_renderer.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from domain.answers import as_token_set


def selected(value: Any, option: Any) -> bool:
    """True when a carried answer (scalar or list) includes option."""
    return str(option) in as_token_set(value)


class JinjaPageRenderer:
    """
    Render "<template_id>.html" from the templates directory.

    Pages see the request context plus the process-wide globals given here.
    """

    def __init__(self, templates_dir: Path, globals_: Optional[Dict[str, Any]] = None):
        self._dir = Path(templates_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(self._dir)),
            autoescape=select_autoescape(["html"]),
        )
        self._env.globals.update(globals_ or {})
        self._env.globals["selected"] = selected

    def exists(self, template_id: str) -> bool:
        try:
            self._env.get_template(f"{template_id}.html")
        except TemplateNotFound:
            return False
        return True

    def render(self, template_id: str, context: Dict[str, Any]) -> str:
        template = self._env.get_template(f"{template_id}.html")
        return template.render(**context)

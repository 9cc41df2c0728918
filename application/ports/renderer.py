# application/ports/renderer.py
from __future__ import annotations

from typing import Any, Dict, Protocol


class PageRendererPort(Protocol):
    def render(self, template_id: str, context: Dict[str, Any]) -> str:
        ...

    def exists(self, template_id: str) -> bool:
        ...

# create_image/template_io/active_template.py
# Tracks which template is active for generation via templates/.active-style

from __future__ import annotations

from pathlib import Path

from .generics import write_text_safe
from .template_loader import get_template_dir

ACTIVE_STYLE_FILENAME = ".active-style"
DEFAULT_ACTIVE_TEMPLATE = "sports/illustrative"


class ActiveTemplateManager:
    def __init__(self, repository_path: Path | str):
        self.templates_dir = Path(repository_path) / "templates"
        self.active_style_path = self.templates_dir / ACTIVE_STYLE_FILENAME

    def get_active_template(self) -> str:
        if self.active_style_path.exists():
            content = self.active_style_path.read_text(encoding="utf-8").strip()
            if content:
                return content
        return DEFAULT_ACTIVE_TEMPLATE

    # raises TemplateNotFoundError for unknown templates
    def set_active_template(self, template_name: str) -> None:
        get_template_dir(self.templates_dir, template_name)
        write_text_safe(self.active_style_path, template_name)

    def is_active(self, template_name: str) -> bool:
        return self.get_active_template() == template_name

    def get_active_template_dir(self) -> Path:
        return self.templates_dir / self.get_active_template()

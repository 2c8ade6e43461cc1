# create_image/template_io/domain_knowledge.py
# Domain knowledge (system instruction text) per template: view, replace, import & append

from __future__ import annotations

from pathlib import Path

from .generics import read_text_safe, write_text_safe
from .template_loader import get_template_dir
from .types import DomainKnowledgeInfo

DOMAIN_KNOWLEDGE_FILENAME = "domain-knowledge.txt"


class DomainKnowledgeManager:
    def __init__(self, repository_path: Path | str):
        self.templates_dir = Path(repository_path) / "templates"

    def _path(self, template_name: str) -> Path:
        return get_template_dir(self.templates_dir, template_name) / DOMAIN_KNOWLEDGE_FILENAME

    # None when the template has no domain-knowledge.txt
    def get_domain_knowledge(self, template_name: str) -> DomainKnowledgeInfo | None:
        path = self._path(template_name)
        if not path.exists():
            return None
        return DomainKnowledgeInfo.from_content(read_text_safe(path), path)

    def update_domain_knowledge(self, template_name: str, content: str) -> DomainKnowledgeInfo:
        path = self._path(template_name)
        write_text_safe(path, content)
        return DomainKnowledgeInfo.from_content(content, path)

    # replace contents w/ a local file (FileReadError when missing)
    def update_from_file(self, template_name: str, file_path: Path | str) -> DomainKnowledgeInfo:
        content = read_text_safe(file_path)
        return self.update_domain_knowledge(template_name, content)

    # * Append a rule block, keeping a blank line between blocks
    def append_to_domain_knowledge(self, template_name: str, text: str) -> DomainKnowledgeInfo:
        current = self.get_domain_knowledge(template_name)
        content = current.content if current else ""
        if not content:
            separator = ""
        else:
            separator = "\n" if content.endswith("\n") else "\n\n"
        return self.update_domain_knowledge(template_name, content + separator + text + "\n")

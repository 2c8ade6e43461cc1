# create_image/template_io/__init__.py
# Package initialization & exports for template file operations

from .generics import (
    ensure_parent,
    exit_with_error,
    read_json_safe,
    read_text_safe,
    write_json_safe,
    write_text_safe,
)
from .template_loader import TemplateLoader, find_style_grid, get_template_dir
from .style_references import StyleReferenceManager
from .domain_knowledge import DomainKnowledgeManager
from .active_template import ActiveTemplateManager, DEFAULT_ACTIVE_TEMPLATE
from .types import (
    DomainKnowledgeInfo,
    StyleReferenceGeneration,
    StyleReferenceInfo,
    Template,
    TemplateInfo,
    TemplateRegistry,
)

__all__ = [
    # Generics
    "ensure_parent",
    "exit_with_error",
    "read_json_safe",
    "read_text_safe",
    "write_json_safe",
    "write_text_safe",
    # Managers
    "TemplateLoader",
    "StyleReferenceManager",
    "DomainKnowledgeManager",
    "ActiveTemplateManager",
    "DEFAULT_ACTIVE_TEMPLATE",
    "find_style_grid",
    "get_template_dir",
    # Types
    "DomainKnowledgeInfo",
    "StyleReferenceGeneration",
    "StyleReferenceInfo",
    "Template",
    "TemplateInfo",
    "TemplateRegistry",
]

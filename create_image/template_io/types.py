# create_image/template_io/types.py
# Shared type definitions for templates, registry entries & template side files

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


# registry entry for one topic/style template
@dataclass
class TemplateInfo:
    name: str  # "topic/style"
    topic: str
    style: str
    description: str = ""
    path: str = ""
    version: str = "1.0.0"
    tags: list[str] = field(default_factory=list)
    supported_types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "topic": self.topic,
            "style": self.style,
            "description": self.description,
            "path": self.path,
            "version": self.version,
            "tags": list(self.tags),
            "supportedTypes": list(self.supported_types),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TemplateInfo":
        name = str(data.get("name", ""))
        topic, _, style = name.partition("/")
        return cls(
            name=name,
            topic=str(data.get("topic") or topic),
            style=str(data.get("style") or style or "default"),
            description=str(data.get("description") or ""),
            path=str(data.get("path") or ""),
            version=str(data.get("version") or "1.0.0"),
            tags=list(data.get("tags") or []),
            supported_types=list(
                data.get("supportedTypes") or data.get("supported_types") or []
            ),
        )


# templates/registry.json contents
@dataclass
class TemplateRegistry:
    templates: list[TemplateInfo] = field(default_factory=list)
    last_updated: str = ""
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "templates": [t.to_dict() for t in self.templates],
            "lastUpdated": self.last_updated,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TemplateRegistry":
        return cls(
            templates=[TemplateInfo.from_dict(t) for t in data.get("templates") or []],
            last_updated=str(data.get("lastUpdated") or ""),
            version=str(data.get("version") or "1.0.0"),
        )


# fully loaded template (config + side files)
@dataclass
class Template:
    name: str
    topic: str
    style: str
    description: str
    config: dict[str, Any] = field(default_factory=dict)
    style_guide: dict[str, Any] = field(default_factory=dict)
    domain_knowledge: str = ""
    prompts: dict[str, str] = field(default_factory=dict)
    style_grid_path: str | None = None


# one image in a template's style-references/ directory
@dataclass
class StyleReferenceInfo:
    name: str  # filename without extension
    filename: str
    path: Path
    size_kb: int
    is_active: bool


# domain-knowledge.txt contents & stats
@dataclass
class DomainKnowledgeInfo:
    content: str
    line_count: int
    size_bytes: int
    path: Path

    @classmethod
    def from_content(cls, content: str, path: Path) -> "DomainKnowledgeInfo":
        return cls(
            content=content,
            line_count=len(content.split("\n")),
            size_bytes=len(content.encode("utf-8")),
            path=path,
        )


# result of generating a style reference for a template
@dataclass
class StyleReferenceGeneration:
    success: bool
    path: str | None = None
    individual_paths: list[str] = field(default_factory=list)
    grid_size_kb: int | None = None
    error: str | None = None
    padded: bool = False

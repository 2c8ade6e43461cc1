# create_image/template_io/template_loader.py
# Template loading w/ registry lookup (templates/registry.json) & in-memory TTL cache

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from .generics import read_json_safe, read_text_safe, write_json_safe
from .types import Template, TemplateInfo, TemplateRegistry
from ..core.exceptions import (
    CreateImageError,
    JSONParsingError,
    TemplateNotFoundError,
)
from ..core.verbose import vlog, vlog_warning

REGISTRY_FILENAME = "registry.json"
REGISTRY_VERSION = "1.0.0"


# * Resolve {templates_dir}/{name}, raising when the directory is missing
def get_template_dir(templates_dir: Path, template_name: str) -> Path:
    template_dir = Path(templates_dir) / template_name
    if not template_dir.is_dir():
        raise TemplateNotFoundError(
            f"Template not found: {template_name}", template_name
        )
    return template_dir


# first "*grid*.png" in style-references/ (sorted for determinism)
def find_style_grid(template_dir: Path) -> str | None:
    refs_dir = template_dir / "style-references"
    if not refs_dir.is_dir():
        return None
    for entry in sorted(refs_dir.iterdir()):
        if "grid" in entry.name and entry.name.endswith(".png"):
            return str(entry)
    return None


class TemplateLoader:
    def __init__(
        self,
        repository_path: Path | str,
        cache_ttl: float = 3600.0,
        clock: Callable[[], float] = time.time,
    ):
        self.repository_path = Path(repository_path)
        self.templates_dir = self.repository_path / "templates"
        self.registry_path = self.templates_dir / REGISTRY_FILENAME
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, tuple[Template, float]] = {}
        self._registry: TemplateRegistry | None = None

    # * Load a template by "topic/style" name (None when missing or unreadable)
    def load(self, template_name: str) -> Template | None:
        cached = self._cache.get(template_name)
        if cached is not None and self._clock() - cached[1] < self.cache_ttl:
            vlog("TEMPLATE", f"Cache hit: {template_name}")
            return cached[0]

        template = self._load_from_disk(template_name)
        if template is None:
            return None

        if self.cache_ttl > 0:
            self._cache[template_name] = (template, self._clock())
        return template

    def _load_from_disk(self, template_name: str) -> Template | None:
        try:
            template_dir = get_template_dir(self.templates_dir, template_name)
        except TemplateNotFoundError:
            vlog_warning(f"Template not found: {template_name}")
            return None

        try:
            config = _read_optional_json(template_dir / "config.json")
            style_guide = _read_optional_json(template_dir / "style-guide.json")

            dk_path = template_dir / "domain-knowledge.txt"
            domain_knowledge = read_text_safe(dk_path) if dk_path.exists() else ""

            prompts: dict[str, str] = {}
            prompts_dir = template_dir / "prompts"
            if prompts_dir.is_dir():
                for prompt_file in sorted(prompts_dir.glob("*.txt")):
                    prompts[prompt_file.stem] = read_text_safe(prompt_file)
        except CreateImageError as e:
            vlog_warning(f"Error loading {template_name}: {e}")
            return None

        topic, _, style = template_name.partition("/")
        template = Template(
            name=config.get("name") or template_name.replace("/", "-"),
            topic=config.get("topic") or topic,
            style=config.get("style") or style or "default",
            description=config.get("description") or "",
            config=config,
            style_guide=style_guide,
            domain_knowledge=domain_knowledge,
            prompts=prompts,
            style_grid_path=find_style_grid(template_dir),
        )
        vlog("TEMPLATE", f"Loaded: {template_name}")
        return template

    # * Registry from disk, or built by scanning (then saved)
    def load_registry(self) -> TemplateRegistry:
        if self._registry is not None:
            return self._registry

        if self.registry_path.exists():
            try:
                self._registry = TemplateRegistry.from_dict(
                    read_json_safe(self.registry_path)
                )
                return self._registry
            except (CreateImageError, AttributeError, TypeError) as e:
                vlog_warning(f"Failed to load registry, rebuilding... ({e})")

        self._registry = self.build_registry()
        self._save_registry(self._registry)
        return self._registry

    # * Scan templates/{topic}/{style}/config.json
    def build_registry(self) -> TemplateRegistry:
        templates: list[TemplateInfo] = []

        if self.templates_dir.is_dir():
            for topic_dir in sorted(p for p in self.templates_dir.iterdir() if p.is_dir()):
                for style_dir in sorted(p for p in topic_dir.iterdir() if p.is_dir()):
                    name = f"{topic_dir.name}/{style_dir.name}"
                    config_path = style_dir / "config.json"
                    if not config_path.exists():
                        vlog("TEMPLATE", f"No config.json in {name}, skipping")
                        continue
                    try:
                        config = read_json_safe(config_path)
                    except CreateImageError as e:
                        vlog_warning(f"Error reading {name}: {e}")
                        continue

                    templates.append(
                        TemplateInfo(
                            name=name,
                            topic=topic_dir.name,
                            style=style_dir.name,
                            description=config.get("description") or "",
                            path=str(style_dir),
                            version=config.get("version") or REGISTRY_VERSION,
                            tags=list(config.get("tags") or []),
                            supported_types=list(config.get("supported_types") or []),
                        )
                    )

        return TemplateRegistry(
            templates=templates,
            last_updated=datetime.now(timezone.utc).isoformat(),
            version=REGISTRY_VERSION,
        )

    def _save_registry(self, registry: TemplateRegistry) -> None:
        if not self.templates_dir.is_dir():
            return
        try:
            write_json_safe(registry.to_dict(), self.registry_path)
        except CreateImageError as e:
            vlog_warning(f"Failed to save registry: {e}")
            return
        vlog("TEMPLATE", f"Registry saved: {len(registry.templates)} templates")

    def rebuild_registry(self) -> TemplateRegistry:
        self._registry = self.build_registry()
        self._save_registry(self._registry)
        return self._registry

    def list(self) -> list[TemplateInfo]:
        return self.load_registry().templates

    def find_by_topic(self, topic: str) -> list[TemplateInfo]:
        return [t for t in self.list() if t.topic == topic]

    def find_by_tag(self, tag: str) -> list[TemplateInfo]:
        return [t for t in self.list() if tag in t.tags]

    # case-insensitive match on name, description or any tag
    def search(self, keyword: str) -> list[TemplateInfo]:
        needle = keyword.lower()
        return [
            t
            for t in self.list()
            if needle in t.name.lower()
            or needle in t.description.lower()
            or any(needle in tag.lower() for tag in t.tags)
        ]

    def clear_cache(self) -> None:
        self._cache.clear()
        vlog("TEMPLATE", "Cache cleared")

    def cache_stats(self) -> dict[str, Any]:
        return {"size": len(self._cache), "templates": list(self._cache)}


def _read_optional_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = read_json_safe(path)
    if not isinstance(data, dict):
        raise JSONParsingError(f"Expected a JSON object in {path}")
    return data

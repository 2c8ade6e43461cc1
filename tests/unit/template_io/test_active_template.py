# tests/unit/template_io/test_active_template.py
# Unit tests for active template tracking

import pytest

from create_image.core.exceptions import TemplateNotFoundError
from create_image.template_io.active_template import (
    DEFAULT_ACTIVE_TEMPLATE,
    ActiveTemplateManager,
)


class TestActiveTemplateManager:
    # * Verify default w/o a marker file
    def test_default(self, repo):
        assert ActiveTemplateManager(repo).get_active_template() == DEFAULT_ACTIVE_TEMPLATE

    # * Verify set persists to templates/.active-style
    def test_set(self, repo):
        manager = ActiveTemplateManager(repo)
        manager.set_active_template("business/photo")

        assert (repo / "templates" / ".active-style").read_text(encoding="utf-8") == "business/photo"
        assert ActiveTemplateManager(repo).get_active_template() == "business/photo"
        assert manager.is_active("business/photo")
        assert not manager.is_active(DEFAULT_ACTIVE_TEMPLATE)
        assert manager.get_active_template_dir() == repo / "templates" / "business" / "photo"

    # * Verify blank marker falls back to the default
    def test_blank_marker(self, repo):
        (repo / "templates" / ".active-style").write_text("  \n", encoding="utf-8")
        assert ActiveTemplateManager(repo).get_active_template() == DEFAULT_ACTIVE_TEMPLATE

    # * Verify unknown template rejected & marker untouched
    def test_set_unknown(self, repo):
        with pytest.raises(TemplateNotFoundError):
            ActiveTemplateManager(repo).set_active_template("nope/none")
        assert not (repo / "templates" / ".active-style").exists()

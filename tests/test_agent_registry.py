"""Tests for agent registry: config loading, merging, caching, fail-fast."""

import os
import sys
import tempfile
from pathlib import Path
from unittest import TestCase, main

# Allow importing orderdesk when running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic_ai.models.function import FunctionModel


class TestAgentRegistry(TestCase):
    """Tests for agent registry config loading, merging, caching, fail-fast."""

    def tearDown(self):
        import orderdesk.agents.registry as reg

        os.environ.pop("AGENTS_CONFIG_PATH", None)
        reg.reload_config()

    def _use_config(self, text: str) -> None:
        import orderdesk.agents.registry as reg

        tmp = tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False, encoding="utf-8")
        tmp.write(text)
        tmp.close()
        self.addCleanup(os.unlink, tmp.name)
        os.environ["AGENTS_CONFIG_PATH"] = tmp.name
        reg._config = None
        reg._agent_cache.clear()

    def test_fail_fast_missing_config(self):
        """When agents config file is missing, registry raises FileNotFoundError."""
        import orderdesk.agents.registry as reg

        os.environ["AGENTS_CONFIG_PATH"] = str(Path("/nonexistent/agents.yaml"))
        reg._config = None
        with self.assertRaises(FileNotFoundError) as ctx:
            reg._load_config()
        self.assertIn("not found", str(ctx.exception).lower())

    def test_load_config_returns_structure(self):
        """get_all_config returns dict with defaults and the inquiry parser agent."""
        from orderdesk.agents.registry import get_all_config

        config = get_all_config()
        self.assertIn("defaults", config)
        self.assertIn("inquiry_parser", config["agents"])

    def test_get_agent_config_merges_defaults(self):
        from orderdesk.agents.registry import get_agent_config

        cfg = get_agent_config("inquiry_parser")
        self.assertEqual(cfg["model"], "openai:gpt-4o-mini")
        self.assertIn("retries", cfg)
        self.assertIn("{catalog}", cfg["system_prompt"])

    def test_templates_render(self):
        from orderdesk.agents.registry import get_system_prompt_template, get_user_prompt_template

        system = get_system_prompt_template("inquiry_parser").format(catalog="- WH-X: Thing")
        user = get_user_prompt_template("inquiry_parser").format(raw_inquiry="I need 50 LED lights")
        self.assertIn("- WH-X: Thing", system)
        self.assertIn("I need 50 LED lights", user)
        self.assertIn('"items"', user)

    def test_unknown_agent_raises(self):
        from orderdesk.agents.registry import get_agent_config

        with self.assertRaises(ValueError) as ctx:
            get_agent_config("nope")
        self.assertIn("Unknown agent", str(ctx.exception))

    def test_missing_system_prompt_rejected(self):
        import orderdesk.agents.registry as reg

        self._use_config("agents:\n  inquiry_parser:\n    model: test\n")
        with self.assertRaises(ValueError):
            reg.get_all_config()

    def test_invalid_yaml_rejected(self):
        import orderdesk.agents.registry as reg

        self._use_config("agents: [unclosed\n")
        with self.assertRaises(ValueError):
            reg.get_all_config()

    def test_agent_cache(self):
        from orderdesk.agents.registry import get_agent

        first = get_agent("inquiry_parser")
        self.assertIs(first, get_agent("inquiry_parser"))
        injected = get_agent("inquiry_parser", model=FunctionModel(lambda messages, info: None))
        self.assertIsNot(first, injected)


if __name__ == "__main__":
    main()

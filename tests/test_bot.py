import os
import tempfile
import unittest
from unittest.mock import patch

from fakes import FakeChatPlatform

from assistant_relay.bot import build_router, main
from assistant_relay.config import load_config
from assistant_relay.model_providers.openai_provider import OpenAIAssistantProvider
from assistant_relay.session_store import JsonFileSessionStore


class TestBootstrap(unittest.TestCase):
    def test_build_router_uses_startup_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            env = {
                "TELEGRAM_TOKEN": "123:abc",
                "OPENAI_API_KEY": "sk-test",
                "ASSISTANT_ID": "asst_123",
                "POLL_MAX_ATTEMPTS": "3",
                "POLL_INTERVAL": "2",
                "RESTART_COMMAND": "/reset",
                "SESSION_STORE_PATH": os.path.join(tmp, "sessions.json"),
            }
            with patch.dict(os.environ, env, clear=True):
                config = load_config()

            router = build_router(config, FakeChatPlatform())

        self.assertIsInstance(router.store, JsonFileSessionStore)
        self.assertIsInstance(router.orchestrator.provider, OpenAIAssistantProvider)
        self.assertEqual(router.orchestrator.assistant_id, "asst_123")
        self.assertEqual(router.orchestrator.policy.max_attempts, 3)
        self.assertEqual(router.orchestrator.policy.interval, 2.0)
        self.assertEqual(router.commands.restart_command, "/reset")

    def test_missing_config_exits(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)

    def test_malformed_number_exits(self):
        env = {
            "TELEGRAM_TOKEN": "123:abc",
            "OPENAI_API_KEY": "sk-test",
            "ASSISTANT_ID": "asst_123",
            "POLL_INTERVAL": "soon",
        }
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(SystemExit) as ctx:
                main()
        self.assertEqual(ctx.exception.code, 1)


if __name__ == "__main__":
    unittest.main()

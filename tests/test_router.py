import os
import tempfile
import unittest
from unittest.mock import AsyncMock

from fakes import FakeAssistantProvider, FakeChatPlatform, FakeTranscriber, no_sleep, text_part

from assistant_relay.chat_platform import InboundMessage
from assistant_relay.errors import ThreadCreationError
from assistant_relay.router import MessageRouter
from assistant_relay.runs import RunOrchestrator
from assistant_relay.session_store import MemorySessionStore
from assistant_relay.threads import ThreadManager


class RouterTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.provider = FakeAssistantProvider()
        handle, self.voice_path = tempfile.mkstemp(suffix=".ogg")
        os.close(handle)
        self.addCleanup(self.remove_voice_file)
        self.platform = FakeChatPlatform(voice_path=self.voice_path)
        self.store = MemorySessionStore()
        self.transcriber = FakeTranscriber(text="What is the weather?")
        self.router = self.make_router()

    def remove_voice_file(self):
        if os.path.exists(self.voice_path):
            os.remove(self.voice_path)

    def make_router(self, **kwargs):
        threads = ThreadManager(self.provider)
        orchestrator = RunOrchestrator(self.provider, threads, "asst_123", sleep=no_sleep, **kwargs)
        return MessageRouter(self.platform, self.store, threads, orchestrator, self.transcriber)


class TestTextPath(RouterTestCase):
    async def test_first_message_creates_one_thread_and_mapping(self):
        reply = await self.router.handle(InboundMessage(chat_id=42, text="Hello"))

        self.assertEqual(reply, "Hi there")
        self.assertEqual(len(self.provider.threads), 1)
        self.assertEqual(len(self.store), 1)
        thread_id = self.store.get(42)
        self.assertEqual(self.provider.threads[thread_id], ["Hello"])
        self.assertEqual(self.platform.sent, [(42, "Hi there")])

    async def test_mapping_exists_before_orchestrator_runs(self):
        seen = {}
        original = self.router.orchestrator.run_message

        async def spy(thread_id, text):
            seen["mapped"] = self.store.get(42)
            seen["thread_count"] = len(self.provider.threads)
            return await original(thread_id, text)

        self.router.orchestrator.run_message = spy
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))

        self.assertIsNotNone(seen["mapped"])
        self.assertEqual(seen["thread_count"], 1)

    async def test_existing_session_reuses_thread(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        await self.router.handle(InboundMessage(chat_id=42, text="Again"))

        self.assertEqual(len(self.provider.threads), 1)
        self.assertEqual(self.provider.threads[self.store.get(42)], ["Hello", "Again"])
        self.assertEqual(len(self.platform.sent), 2)

    async def test_sessions_are_independent(self):
        await self.router.handle(InboundMessage(chat_id=1, text="a"))
        await self.router.handle(InboundMessage(chat_id=2, text="b"))

        self.assertNotEqual(self.store.get(1), self.store.get(2))
        self.assertEqual(len(self.provider.threads), 2)

    async def test_terminal_error_text_is_sent_as_reply(self):
        self.provider.statuses = ["expired"]
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        self.assertEqual(self.platform.sent, [(42, "Run is expired")])

    async def test_empty_reply_is_not_sent(self):
        self.provider.reply = []
        reply = await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        self.assertIsNone(reply)
        self.assertEqual(self.platform.sent, [])

    async def test_thread_creation_failure_propagates_without_mapping(self):
        self.provider.fail_create_thread = True
        with self.assertRaises(ThreadCreationError):
            await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        self.assertIsNone(self.store.get(42))
        self.assertEqual(self.platform.sent, [])

    async def test_whitespace_text_is_relayed(self):
        reply = await self.router.handle(InboundMessage(chat_id=42, text="   "))
        self.assertEqual(reply, "Hi there")
        self.assertEqual(self.provider.threads[self.store.get(42)], ["   "])

    async def test_other_updates_are_ignored(self):
        self.assertIsNone(await self.router.handle(InboundMessage(chat_id=42)))
        self.assertEqual(self.provider.threads, {})
        self.assertEqual(self.platform.sent, [])


class TestRestartCommand(RouterTestCase):
    async def test_restart_deletes_thread_and_mapping(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        old_thread = self.store.get(42)

        reply = await self.router.handle(InboundMessage(chat_id=42, text="/restart"))

        self.assertIsNone(reply)
        self.assertEqual(self.provider.deleted, [old_thread])
        self.assertIsNone(self.store.get(42))
        self.assertEqual(len(self.platform.sent), 1)

    async def test_next_message_after_restart_gets_new_thread(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        old_thread = self.store.get(42)
        await self.router.handle(InboundMessage(chat_id=42, text="/restart"))

        await self.router.handle(InboundMessage(chat_id=42, text="Hello again"))

        new_thread = self.store.get(42)
        self.assertIsNotNone(new_thread)
        self.assertNotEqual(new_thread, old_thread)
        self.assertEqual(self.provider.threads[new_thread], ["Hello again"])

    async def test_restart_without_session_sends_nothing(self):
        reply = await self.router.handle(InboundMessage(chat_id=42, text="/restart"))

        self.assertIsNone(reply)
        self.assertEqual(self.provider.threads, {})
        self.assertEqual(self.provider.deleted, [])
        self.assertEqual(self.platform.sent, [])

    async def test_restart_with_bot_mention(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        await self.router.handle(InboundMessage(chat_id=42, text="/restart@relay_bot"))
        self.assertIsNone(self.store.get(42))

    async def test_restart_for_another_bot_keeps_session(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        thread_id = self.store.get(42)

        await self.router.handle(InboundMessage(chat_id=42, text="/restart@some_other_bot"))

        self.assertEqual(self.store.get(42), thread_id)
        self.assertEqual(self.provider.deleted, [])

    async def test_restart_is_case_sensitive(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        thread_id = self.store.get(42)

        await self.router.handle(InboundMessage(chat_id=42, text="/RESTART"))

        self.assertEqual(self.store.get(42), thread_id)
        self.assertEqual(self.provider.deleted, [])

    async def test_mention_ignored_when_username_unknown(self):
        self.platform.bot_username = None
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))

        await self.router.handle(InboundMessage(chat_id=42, text="/restart@relay_bot"))

        self.assertIsNotNone(self.store.get(42))

    async def test_failed_delete_still_clears_mapping(self):
        await self.router.handle(InboundMessage(chat_id=42, text="Hello"))
        self.provider.fail_delete_thread = True

        await self.router.handle(InboundMessage(chat_id=42, text="/restart"))

        self.assertIsNone(self.store.get(42))


class TestVoicePath(RouterTestCase):
    async def test_download_failure_sends_nothing(self):
        self.platform.voice_path = None

        reply = await self.router.handle(InboundMessage(chat_id=42, voice_file_id="voice-1"))

        self.assertIsNone(reply)
        self.assertEqual(self.platform.downloads, ["voice-1"])
        self.assertEqual(self.transcriber.calls, [])
        self.assertEqual(self.platform.sent, [])

    async def test_transcription_failure_sends_nothing(self):
        self.transcriber.error = RuntimeError("whisper down")

        reply = await self.router.handle(InboundMessage(chat_id=42, voice_file_id="voice-1"))

        self.assertIsNone(reply)
        self.assertEqual(self.platform.sent, [])
        self.assertEqual(self.provider.threads, {})

    async def test_transcript_follows_text_path(self):
        reply = await self.router.handle(InboundMessage(chat_id=42, voice_file_id="voice-1"))

        self.assertEqual(reply, "Hi there")
        self.assertEqual(self.transcriber.calls, [self.voice_path])
        thread_id = self.store.get(42)
        self.assertEqual(self.provider.threads[thread_id], ["What is the weather?"])
        self.assertEqual(self.platform.sent, [(42, "Hi there")])

    async def test_voice_matches_typed_text(self):
        self.router.handle_text = AsyncMock(return_value="ok")

        await self.router.handle(InboundMessage(chat_id=7, voice_file_id="voice-1"))

        self.router.handle_text.assert_awaited_once_with(7, "What is the weather?")

    async def test_voice_takes_precedence_over_caption_text(self):
        self.provider.reply = [text_part("from voice")]
        await self.router.handle(InboundMessage(chat_id=42, text="ignored", voice_file_id="voice-1"))
        self.assertEqual(self.provider.threads[self.store.get(42)], ["What is the weather?"])


if __name__ == "__main__":
    unittest.main()

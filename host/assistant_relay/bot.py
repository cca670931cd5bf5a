"""
Thin bootstrapper that wires together the high-level pieces
and starts Telegram long polling.
"""

import logging
import sys

from .config import Config, load_config, setup_logging
from .errors import StartupError
from .model_providers import ModelProviderFactory
from .router import MessageRouter
from .runs import RunOrchestrator
from .session_store import create_session_store
from .telegram_platform import TelegramChatPlatform, build_application, register_router
from .threads import ThreadManager
from .utils import PollPolicy

log = logging.getLogger(__name__)


def build_router(config: Config, platform) -> MessageRouter:
    """Create every collaborator once from the startup configuration"""
    assistant = ModelProviderFactory.create_assistant_provider("openai", api_key=config.openai_api_key)
    transcriber = ModelProviderFactory.create_transcription_provider(
        "openai", api_key=config.openai_api_key, model=config.stt_model
    )
    store = create_session_store(config.session_store_path)
    threads = ThreadManager(assistant)
    orchestrator = RunOrchestrator(
        assistant,
        threads,
        config.assistant_id,
        policy=PollPolicy(max_attempts=config.poll_max_attempts, interval=config.poll_interval),
        fresh_thread_per_message=config.fresh_thread_per_message,
    )
    return MessageRouter(
        platform,
        store,
        threads,
        orchestrator,
        transcriber,
        restart_command=config.restart_command,
    )


def main() -> None:
    """Main entry point"""
    try:
        config = load_config()
    except StartupError as e:
        # Logging is not configured yet
        print(f"Startup failed: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config)
    log.info("Relay bot starting up...")
    log.info(
        f"Configuration: assistant={config.assistant_id}, STT={config.stt_model}, "
        f"poll={config.poll_max_attempts}x{config.poll_interval}s, "
        f"fresh_thread_per_message={config.fresh_thread_per_message}"
    )

    try:
        application = build_application(config)
        platform = TelegramChatPlatform(application.bot, config.voice_download_dir)
        router = build_router(config, platform)
    except StartupError as e:
        log.error(f"Startup failed: {e}")
        sys.exit(1)

    register_router(application, router.handle)

    try:
        application.run_polling(allowed_updates=["message"])
    except KeyboardInterrupt:
        log.info("Shutdown requested by user.")

    log.info("Relay bot shutdown complete")


if __name__ == "__main__":
    main()

import logging
import random
import signal
import threading
from queue import Queue
from typing import Any, Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    SecretConfig,
    load_app_config,
    load_secret_config,
    resolve_config_path,
)
from app_config_schema import ALERT_OUTPUT_SPEAKER
from notifications import SpeakerPlayback
from posture import PostureAnalyzer, PostureConfig, PostureConfigurationError, PostureError
from reminders import ReminderOverride, ReminderRegistry
from runtime import CommandQueuePublisher, RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig
from tts import (
    PiperTTSEngine,
    SoundDeviceAudioOutput,
    SpeechService,
    TTSConfig,
    TTSConfigurationError,
    TTSError,
)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("deskwell")


def setup_signal_handlers(stop_event: threading.Event) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logging.getLogger("deskwell").info(
            "%s received, stopping...", signal.Signals(signum).name
        )
        stop_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_speech_service(
    app_config: AppConfig,
    logger: logging.Logger,
) -> Optional[SpeechService]:
    if not app_config.tts.enabled:
        return None
    try:
        tts_config = TTSConfig.from_settings(app_config.tts)
        engine = PiperTTSEngine(
            config=tts_config,
            logger=logging.getLogger("tts.engine"),
        )
    except (TTSConfigurationError, TTSError) as error:
        logger.warning("TTS disabled due to init error: %s", error)
        return None
    logger.info("TTS enabled (voice: %s)", tts_config.voice_path)
    return SpeechService(engine=engine, logger=logging.getLogger("tts"))


def build_posture_analyzer(
    app_config: AppConfig,
    secret_config: SecretConfig,
    logger: logging.Logger,
) -> Optional[PostureAnalyzer]:
    if not app_config.posture.enabled:
        return None
    try:
        posture_config = PostureConfig.from_settings(
            app_config.posture,
            hf_token=secret_config.hf_token,
            logger=logging.getLogger("posture.config"),
        )
        analyzer = PostureAnalyzer.from_config(
            posture_config,
            logger=logging.getLogger("posture"),
        )
    except (PostureConfigurationError, PostureError) as error:
        logger.warning("Posture analysis disabled due to init error: %s", error)
        return None
    logger.info("Posture analysis enabled (model: %s)", posture_config.model_path)
    return analyzer


def build_speaker(app_config: AppConfig, logger: logging.Logger) -> Optional[SpeakerPlayback]:
    if app_config.alerts.output != ALERT_OUTPUT_SPEAKER:
        return None
    output_device = app_config.alerts.output_device
    if output_device is None:
        output_device = app_config.tts.output_device
    logger.info("Alerts play on the local speaker")
    return SpeakerPlayback(
        SoundDeviceAudioOutput(
            output_device_index=output_device,
            logger=logging.getLogger("tts.output"),
        ),
        logger=logging.getLogger("notifications.speaker"),
    )


def build_ui_server(
    app_config: AppConfig,
    command_queue: Queue,
    logger: logging.Logger,
) -> Optional[UIServer]:
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    if not ui_server_config.enabled:
        return None

    publisher = CommandQueuePublisher(command_queue)
    try:
        ui_server = UIServer(
            config=ui_server_config,
            logger=logging.getLogger("ui_server"),
            on_command=publisher.publish,
        )
        logger.info("Starting UI server...")
        ui_server.start(timeout_seconds=5.0)
    except Exception as error:
        logger.error("UI server startup failed: %s", error)
        logger.warning("Continuing without UI server.")
        return None

    logger.info("Dashboard ready at http://%s:%d", ui_server.host, ui_server.port)
    return ui_server


def main() -> int:
    """Run the reminder dashboard until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config(str(config_path))
        secret_config = load_secret_config()
        logger.info("Loaded runtime config: %s", config_path)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    overrides = {
        item.key: ReminderOverride(
            enabled=item.enabled,
            frequency_minutes=item.frequency_minutes,
        )
        for item in app_config.reminders.items
    }
    registry = ReminderRegistry(
        overrides=overrides,
        logger=logging.getLogger("reminders"),
    )

    speech_service = build_speech_service(app_config, logger)
    if app_config.reminders.spoken_alerts and speech_service is None:
        logger.warning("Spoken alerts requested but TTS is unavailable; using the chime.")
    posture_analyzer = build_posture_analyzer(app_config, secret_config, logger)
    speaker = build_speaker(app_config, logger)

    command_queue: Queue[Any] = Queue()
    ui_server = build_ui_server(app_config, command_queue, logger)

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            registry=registry,
            command_queue=command_queue,
            speech_service=speech_service,
            posture_analyzer=posture_analyzer,
            ui_server=ui_server,
            hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
            speaker=speaker,
            spoken_alerts=app_config.reminders.spoken_alerts,
            rng=random.Random(),
        )
    )
    return engine.run()


if __name__ == "__main__":
    raise SystemExit(main())

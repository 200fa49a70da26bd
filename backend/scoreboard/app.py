"""Wire configuration, logging, and storage into a ready-to-use game session."""

from datetime import UTC, datetime

import structlog

from scoreboard.config import ScoreboardSettings
from scoreboard.logic.exceptions import StateDecodeError
from scoreboard.logic.session import GameSession
from scoreboard.persistence import StoragePersistenceGateway
from shared.logging import setup_logging
from shared.storage import LocalStateStorage

logger = structlog.get_logger()


def create_session(settings: ScoreboardSettings | None = None) -> GameSession:
    """Build a session backed by the configured state file.

    Resumes the stored session when there is one. A state file that cannot
    be decoded is moved aside as ``<state_file>.unreadable-<timestamp>``
    and a fresh game starts in its place, so the archive it held is kept
    for recovery.
    """
    if settings is None:
        settings = ScoreboardSettings()

    setup_logging(log_dir=settings.log_dir)

    game_settings = settings.to_game_settings()
    storage = LocalStateStorage(settings.state_file)
    gateway = StoragePersistenceGateway(storage, game_settings.max_cards)

    try:
        session = GameSession.restore(gateway, game_settings)
    except StateDecodeError:
        moved_to = storage.move_aside(f"unreadable-{datetime.now(UTC):%Y%m%dT%H%M%S}")
        logger.exception(
            "stored state unreadable, starting a fresh game",
            state_file=settings.state_file,
            moved_to=str(moved_to),
        )
        session = GameSession(game_settings, gateway=gateway)
        session.start_new_game()

    logger.info("scoreboard session ready", phase=session.phase, state_file=settings.state_file)
    return session

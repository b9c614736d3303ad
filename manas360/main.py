"""Main application entry point for MANAS360."""

import sys
import time
import argparse
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from manas360.catalog import Catalog
from manas360.live import GoingLiveIndicator
from manas360.models import Role, SessionDescriptor, Tier, User
from manas360.scheduling import ThreadingScheduler
from manas360.services import LifecycleController, SessionManager
from manas360.ui import CountdownScreen

from .config import PortalConfig

logger = logging.getLogger(__name__)


class PortalServer:

    def __init__(self, config_path: str, log_level: str = None):
        # Load configuration
        self.config = PortalConfig(config_path)
        # Set up logging (command line overrides config)
        self.log_file = setup_logging(self.config, log_level)
        self.should_exit = False
        self.indicator = None
        self.scheduler = None
        self.screen = None

    def init(self, offset_seconds: int, auto_join: bool):
        logger.info("Initializing services...")

        self.catalog = Catalog.load(self.config.get_catalog_path())
        self.operator = User(
            id=self.config.get('operator.id', 'th-1'),
            name=self.config.get('operator.name', 'Dr. Emily Chen'),
            role=Role.THERAPIST,
        )
        self.patient = User(
            id=self.config.get('patient.id', 'pt-1'),
            name=self.config.get('patient.name', 'Anonymous User'),
            role=Role.PATIENT,
        )
        self.auto_join = auto_join

        self.scheduler = ThreadingScheduler(name="portal")
        self.session_manager = SessionManager(self.config, self.catalog, self.operator, clock=self.scheduler.clock)
        self.lifecycle = LifecycleController(Role.PATIENT)

        now = self.scheduler.clock.now()
        self.session_manager.create_session(SessionDescriptor(
            kind="individual",
            patient_name="Sarah Johnson",
            start_time=now + timedelta(minutes=5),
            duration_minutes=45,
            notes="Follow up on anxiety exercises.",
        ))
        theme = self.catalog.themes[0]
        self.featured = self.session_manager.create_session(SessionDescriptor(
            kind="group",
            theme_slug=theme.slug,
            start_time=now + timedelta(seconds=offset_seconds),
            duration_minutes=60,
        ))

        self.indicator = GoingLiveIndicator.for_session(self.featured, self.scheduler, self.config)
        self.screen = CountdownScreen(theme.name, theme.emoji)

        report = self.session_manager.compute_yield()
        logger.info(f"Projected yield: {report.total_revenue} {report.currency} "
                    f"(payout {report.payout}, platform {report.platform_share})")

    def _enter_room(self):
        drop_in = self.session_manager.create_drop_in_session(self.featured.theme.slug)
        self.lifecycle.join(drop_in)

    def run(self, duration: int):
        try:
            self.scheduler.start()
            self.indicator.start()
            with self.screen:
                deadline = time.monotonic() + duration
                while not self.should_exit and time.monotonic() < deadline:
                    snapshot = self.indicator.snapshot
                    if (self.auto_join and snapshot is not None and snapshot.tier is Tier.LIVE_NOW
                            and not self.indicator.join_pending):
                        if self.indicator.join(on_complete=self._enter_room):
                            self.auto_join = False
                    time.sleep(0.25)
        except Exception as e:
            logger.error(f"Error in run: {e}", exc_info=True)
        finally:
            self.cleanup()

    def cleanup(self):
        if self.indicator is not None:
            self.indicator.dispose()
        if self.scheduler is not None:
            self.scheduler.shutdown()
        if self.screen is not None:
            self.screen.close()
            self.screen = None


def setup_logging(config, level: Optional[str] = None) -> Path:
    """Route engine logs to the log file and, optionally, a rich console handler.

    Args:
        config: Loaded PortalConfig
        level: Level name for the file log; falls back to `logging.level`

    Returns:
        Path of the log file
    """
    level = (level or config.get('logging.level', 'INFO')).upper()
    console_level = config.get('logging.console_level', 'WARNING').upper()
    log_file = Path(config.get('logging.file_path', 'data/logs/manas360.log'))
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    handlers = [file_handler]

    # Console handler defaults to WARNING and above
    if config.get('logging.console_output', True):
        console_handler = RichHandler(console=Console(stderr=True), show_path=False)
        console_handler.setLevel(console_level)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(min(logging.getLevelName(level), logging.getLevelName(console_level)))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info(f"MANAS360 session engine logging to {log_file} at {level}")
    return log_file


def main() -> None:
    """Main entry point for MANAS360."""
    parser = argparse.ArgumentParser(
        description="MANAS360 - live session countdown demo",
    )

    parser.add_argument(
        "--config",
        type=str,
        default="manas360.yaml",
        help="Path to configuration YAML file (default: manas360.yaml)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (overrides config)"
    )

    parser.add_argument(
        "--duration",
        type=int,
        default=10,
        help="How long to run the countdown in seconds (default: 10)"
    )

    parser.add_argument(
        "--offset",
        type=int,
        default=125,
        help="Seconds until the featured group session starts (default: 125)"
    )

    parser.add_argument(
        "--auto-join",
        action="store_true",
        help="Join the featured session as soon as it goes live"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="MANAS360 v0.1.0"
    )

    args = parser.parse_args()

    server = PortalServer(args.config, args.log_level)
    try:
        server.init(args.offset, args.auto_join)
        server.run(args.duration)
    except KeyboardInterrupt:
        server.cleanup()
        print("\n👋 Goodbye!")
    except Exception as e:
        print(f"❌ Error: {e}")
        logging.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

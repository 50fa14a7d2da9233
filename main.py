#!/usr/bin/env python3
"""
Pizza Menu Watch

Main entry point for the daily pizza menu watcher.
"""

import logging
import os
import signal
import sys
from datetime import time
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml
from dotenv import load_dotenv

from pizza_watch.extractor import StateExtractor
from pizza_watch.fetcher import DEFAULT_URL, PageFetcher
from pizza_watch.notifier import DEFAULT_TITLE, HomeAssistantNotifier
from pizza_watch.projector import MenuProjector
from pizza_watch.runner import RunCoordinator
from pizza_watch.scheduler import DEFAULT_TIMEZONE, DailyScheduler, SchedulerState
from pizza_watch.state import SnapshotStore

# Load environment variables from .env file
load_dotenv()


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: str = "config.yaml") -> dict:
    """Load configuration from YAML file."""
    config_file = Path(config_path)

    if config_file.exists():
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    else:
        config = {}

    # Allow environment variables to override config
    config["target_url"] = os.getenv("PIZZA_TARGET_URL", config.get("target_url", DEFAULT_URL))
    config["data_file"] = os.getenv("PIZZA_DATA_FILE", config.get("data_file", "data.json"))
    config["ha_url"] = os.getenv("HA_URL", config.get("ha_url", ""))
    config["ha_token"] = os.getenv("HA_TOKEN", config.get("ha_token", ""))
    config["notify_service"] = os.getenv("HA_NOTIFY_SERVICE", config.get("notify_service", "all_phones"))
    config["headless"] = _as_bool(os.getenv("HEADLESS", config.get("headless", True)))
    config["run_at"] = os.getenv("PIZZA_RUN_AT", config.get("run_at", "13:37"))
    config["timezone"] = os.getenv("PIZZA_TIMEZONE", config.get("timezone", DEFAULT_TIMEZONE))
    config["log_level"] = os.getenv("LOG_LEVEL", config.get("log_level", "INFO"))

    if "--no-headless" in sys.argv:
        config["headless"] = False

    return config


def setup_logging(config: dict) -> None:
    """Configure logging based on config."""
    log_level = getattr(logging, config.get("log_level", "INFO").upper(), logging.INFO)
    log_format = config.get(
        "log_format",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_notifier(config: dict) -> HomeAssistantNotifier:
    return HomeAssistantNotifier(
        base_url=config.get("ha_url"),
        token=config.get("ha_token"),
        target_url=config["target_url"],
        service=config.get("notify_service", "all_phones"),
        title=config.get("notification_title", DEFAULT_TITLE),
    )


def build_coordinator(config: dict, notifier: HomeAssistantNotifier) -> RunCoordinator:
    """Wire the pipeline components from config."""
    return RunCoordinator(
        fetcher=PageFetcher(
            url=config["target_url"],
            headless=config.get("headless", True),
            timeout_seconds=config.get("fetch_timeout_seconds", 30),
            ready_selector=config.get("ready_selector", "#footer"),
        ),
        extractor=StateExtractor(),
        projector=MenuProjector(
            category=config.get("category", "pizza"),
            image_size=config.get("image_size", "xl"),
        ),
        store=SnapshotStore(config["data_file"]),
        notifier=notifier,
    )


def build_scheduler(config: dict, coordinator: RunCoordinator) -> DailyScheduler:
    return DailyScheduler(
        job=coordinator.run_once,
        run_at=time.fromisoformat(str(config.get("run_at", "13:37"))),
        tz=ZoneInfo(config.get("timezone", DEFAULT_TIMEZONE)),
    )


def make_shutdown_handler(scheduler: DailyScheduler):
    """Signal handler that stops the scheduler and abandons a run in flight."""
    logger = logging.getLogger(__name__)

    def handle_shutdown(signum: int, frame) -> None:
        logger.info(f"Received signal {signum}, exiting gracefully...")
        scheduler.stop()
        if scheduler.state is SchedulerState.RUNNING:
            raise SystemExit(0)

    return handle_shutdown


def install_signal_handlers(scheduler: DailyScheduler) -> None:
    handler = make_shutdown_handler(scheduler)
    signal.signal(signal.SIGINT, handler)
    signal.signal(signal.SIGTERM, handler)


def main():
    """Main entry point."""
    # Load configuration
    config = load_config()

    # Setup logging
    setup_logging(config)

    logger = logging.getLogger(__name__)
    logger.info("=" * 50)
    logger.info("🍕 Pizza Menu Watch")
    logger.info("=" * 50)

    notifier = build_notifier(config)
    if not notifier.configured:
        logger.warning("HA_URL or HA_TOKEN not set, notifications will only be logged")

    try:
        # Handle test mode
        if "--test" in sys.argv:
            logger.info("Running in test mode...")
            sys.exit(0 if notifier.send_test_notification() else 1)

        try:
            coordinator = build_coordinator(config, notifier)
            scheduler = build_scheduler(config, coordinator)
        except (ValueError, KeyError) as e:
            logger.error(f"Configuration error: {e}")
            sys.exit(1)

        if "--once" in sys.argv:
            try:
                coordinator.run_once()
            except Exception as e:
                logger.error(f"Error running pizza watch: {e}", exc_info=True)
                sys.exit(1)
            sys.exit(0)

        install_signal_handlers(scheduler)
        scheduler.run_forever()
    finally:
        notifier.close()
        logger.info("Goodbye! 🍕")


if __name__ == "__main__":
    main()

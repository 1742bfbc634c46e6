"""
Garage Watch CLI
Main entry point for running the garage door watcher.

  --validate  Check configuration validity and exit
  --once      Run a single poll cycle and exit
"""

import argparse
import logging
import signal
import sys

from .capture import DoorClassifier, capture_frame
from .config import Config, ConfigValidationError, format_duration, load_config
from .core import PollScheduler, StateBroadcaster
from .exceptions import StartupError
from .notifiers import create_notifiers
from .startup import ensure_capture_dir
from .utils.broadcast_server import BroadcastServer

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False, verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
        verbose: If True, include debug output
    """
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("garage_watch.", "gw.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Garage Watch - alert when the garage door is left open",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  garage-watch                       # Run until stopped
  garage-watch -c garage-watch.yaml  # Run with an explicit config file
  garage-watch --once                # Single check, then exit
  garage-watch --validate            # Check configuration only

Environment Variables:
  MODEL_PATH, RTSP_URL, GARAGE_CHECK_INTERVAL, CONFIDENCE_THRESHOLD,
  GRACE_PERIOD, NOTIFICATION_COOLDOWN, MAX_RETRIES, IMAGE_PATH,
  RAM_DISK_SIZE, LOW_CONFIDENCE_DIR, BROADCAST_PORT,
  PUSHOVER_TOKEN + PUSHOVER_USER, NTFY_TOPIC
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: ./garage-watch.yaml if present)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show debug output"
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )
    parser.add_argument(
        "--once", action="store_true", help="Run a single poll cycle and exit"
    )

    return parser.parse_args(argv)


def print_summary(config: Config) -> None:
    """Print the effective settings."""
    decision = config.decision
    grace = format_duration(decision.grace_period) if decision.grace_enabled else "off"
    notifiers = ", ".join(n.id for n in config.notifications.notifiers) or "log only"

    print("\n" + "=" * 70)
    print("GARAGE WATCH")
    print("=" * 70)
    print(f"\nModel: {config.model.path}")
    print(f"Camera: {config.camera.url}")
    print(f"Frame: {config.camera.image_path}")
    print(f"\nPoll every: {format_duration(config.polling.interval)}")
    print(f"Retries per cycle: {config.polling.max_retries}")
    print(f"Confidence threshold: {decision.confidence_threshold}%")
    print(f"Grace window: {grace}")
    print(f"Notification cooldown: {format_duration(config.notifications.cooldown)}")
    print(f"Notifiers: {notifiers}")
    if config.broadcast.enabled:
        print(f"Broadcast: {config.broadcast.host}:{config.broadcast.port}")
    print("=" * 70 + "\n")


def _setup_signal_handlers(scheduler: PollScheduler) -> None:
    """Stop the loop between cycles on SIGTERM/SIGINT."""

    def _handle_shutdown_signal(signum, _frame):
        signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
        # Note: print is safer than logger in signal handlers
        print(f"\nReceived {signal_name}, stopping after the current check...")
        scheduler.stop()

    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def build_scheduler(config: Config, broadcaster: StateBroadcaster) -> PollScheduler:
    """Wire the real camera, model and notifiers into a scheduler."""
    classifier = DoorClassifier(config.model.path)
    notifier = create_notifiers(
        [n.model_dump(exclude_none=True) for n in config.notifications.notifiers]
    )
    return PollScheduler.from_config(
        config,
        capture=capture_frame,
        classify=classifier.classify,
        notifier=notifier,
        broadcaster=broadcaster,
    )


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate, verbose=args.verbose)

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.validate:
        print("Configuration valid")
        print_summary(config)
        sys.exit(0)

    try:
        ensure_capture_dir(config.camera.image_path, config.camera.ram_disk_size_mb)
    except StartupError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)

    print_summary(config)

    broadcaster = StateBroadcaster()
    scheduler = build_scheduler(config, broadcaster)

    if args.once:
        result = scheduler.run_cycle()
        scheduler.shutdown()
        sys.exit(0 if result.ok else 1)

    server = None
    if config.broadcast.enabled:
        server = BroadcastServer(broadcaster, config.broadcast.host, config.broadcast.port)
        try:
            server.start()
        except OSError as e:
            logger.error(f"Cannot start state broadcast on port {config.broadcast.port}: {e}")
            sys.exit(1)

    _setup_signal_handlers(scheduler)
    try:
        scheduler.run_forever()
    finally:
        if server is not None:
            server.stop()


if __name__ == "__main__":
    main()

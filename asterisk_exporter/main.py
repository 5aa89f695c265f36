"""Main application entry point for the Asterisk Prometheus exporter."""

import argparse
import logging
import signal
import sys
import threading
from typing import Optional

from prometheus_client import CollectorRegistry, generate_latest, start_http_server

from .collectors.registry import ExporterRegistry, create_registry
from .config.loader import ConfigLoader
from .config.models import ExporterConfig
from .config.settings import Settings
from .utils.logger import setup_logger


class ExporterApp:
    """
    Exporter application.

    Loads configuration, builds the collectors once and serves them on a
    pull endpoint until interrupted (SIGTERM/SIGINT).
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        log_level: Optional[str] = None
    ):
        """
        Initialize exporter application.

        Args:
            config_path: Path to configuration file
            log_level: Overrides the configured log level when set
        """
        self.config_path = config_path
        self.logger = setup_logger("asterisk_exporter", log_level or "INFO")
        self._stop = threading.Event()

        self.config = self._load_config()
        self.logger = setup_logger(
            "asterisk_exporter",
            log_level or self.config.logging.level,
            self.config.logging.format
        )

        self.exporter_registry: ExporterRegistry = create_registry(self.config, self.logger)
        self.prometheus_registry = CollectorRegistry(auto_describe=True)
        self.prometheus_registry.register(self.exporter_registry)
        self.logger.info("Application initialized successfully")

    def _load_config(self) -> ExporterConfig:
        """
        Load and validate configuration.

        Returns:
            ExporterConfig: Loaded configuration

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load_from_file(self.config_path)
            self.logger.info("Configuration loaded successfully")
            return config

        except FileNotFoundError:
            self.logger.error(
                f"Configuration file not found: {self.config_path}\n"
                "Please create config/config.yaml from config/config.example.yaml"
            )
            sys.exit(1)

        except Exception as e:
            self.logger.error(f"Failed to load configuration: {e}", exc_info=True)
            sys.exit(1)

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down...")
        self._stop.set()

    def render(self) -> str:
        """Run one scrape and return the text exposition."""
        return generate_latest(self.prometheus_registry).decode("utf-8")

    def serve(self, listen_address: Optional[str] = None, port: Optional[int] = None) -> None:
        """
        Serve metrics over HTTP until a shutdown signal arrives.

        Args:
            listen_address: Overrides the configured listen address
            port: Overrides the configured port
        """
        address = listen_address or self.config.exporter.listen_address
        port = port or self.config.exporter.port

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        start_http_server(port, addr=address, registry=self.prometheus_registry)
        self.logger.info(f"Serving metrics on http://{address}:{port}/metrics")

        self._stop.wait()
        self.logger.info("Exporter stopped")


def main():
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    settings = Settings()
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Asterisk chan_sip metrics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve metrics on the configured address
  asterisk-exporter --config /etc/asterisk_exporter/config.yaml

  # Print one scrape to stdout and exit
  asterisk-exporter --once
        """
    )

    parser.add_argument(
        '--config',
        default=settings.CONFIG_PATH,
        help='Path to configuration file (default: ASTERISK_EXPORTER_CONFIG or config/config.yaml)'
    )

    parser.add_argument(
        '--listen-address',
        default=None,
        help='Address to bind the HTTP server to (default: from config)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=None,
        help='Port to serve metrics on (default: from config)'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='Print a single scrape in text exposition format and exit'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: LOG_LEVEL env var or config)'
    )

    args = parser.parse_args()
    log_level = args.log_level or settings.LOG_LEVEL

    app = ExporterApp(config_path=args.config, log_level=log_level)

    if args.once:
        sys.stdout.write(app.render())
        sys.exit(0)

    try:
        app.serve(listen_address=args.listen_address, port=args.port)
    except OSError as e:
        logging.getLogger("asterisk_exporter").error(f"Cannot start HTTP server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()

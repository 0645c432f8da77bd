"""
Main entry point for the NASA hydrology data proxy.

Subcommands:
    serve     Run the proxy web server
    fetch     Run the client-side hydrology service once and print JSON
    health    Check a running proxy and exit 0 when it is healthy
"""

import argparse
import json
import sys
from typing import Optional

from dotenv import load_dotenv

from .api import DataRodsAPI, ProxyAPI, ProxyHealthGate
from .core import Config
from .exceptions import ValidationError
from .logger import attach_handlers, setup_logger
from .services import DataReconciler, HydrologyService


class HydrologyProxyApp:
    """Wires configuration, clients and services together."""

    def __init__(self, config_file: Optional[str] = None, log_level: str = "INFO"):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
            log_level: Logging level name
        """
        self.config = Config(config_file)

        self.logger = setup_logger(log_level=log_level)
        self.logger.info("=" * 60)
        self.logger.info("NASA Hydrology Data Proxy")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.upstream: Optional[DataRodsAPI] = None
        self.reconciler: Optional[DataReconciler] = None

    def initialize_components(self) -> DataReconciler:
        """Create the upstream client and reconciler."""
        from .web import build_reconciler

        if not self.config.has_credentials:
            self.logger.warning("NASA credentials not configured - requests are sent anonymously")
        if not self.config.use_real_data:
            self.logger.warning("Real data mode disabled - every variable is synthesized")

        self.reconciler = build_reconciler(self.config, self.logger)
        self.upstream = self.reconciler.upstream
        return self.reconciler

    def serve(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Run the proxy web server until interrupted."""
        from .web import create_app

        reconciler = self.initialize_components()
        app = create_app(self.config, reconciler, logger=self.logger)

        host = host or self.config.server_host
        port = port or self.config.server_port
        self.logger.info(f"NASA Data Proxy Server running on http://{host}:{port}")
        attach_handlers(self.logger)

        try:
            app.run(host=host, port=port)
        finally:
            if self.upstream:
                self.upstream.close()

    def fetch(self, latitude: float, longitude: float, days: Optional[int] = None) -> dict:
        """Run the client-side service once for a location."""
        with ProxyAPI(
            base_url=self.config.proxy_base_url,
            timeout=self.config.upstream_timeout,
            logger=self.logger
        ) as proxy_api:
            service = HydrologyService(proxy_api, self.config, logger=self.logger)
            return service.get_comprehensive_data(latitude, longitude, days)

    def check_health(self, url: Optional[str] = None, timeout_ms: Optional[float] = None) -> bool:
        gate = ProxyHealthGate(logger=self.logger)
        return gate.is_reachable(
            url or self.config.proxy_base_url,
            timeout_ms or self.config.health_timeout_ms
        )


def main(argv=None):
    """Main entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="NASA Hydrology Data Proxy")
    parser.add_argument("--config", type=str, default=None, help="Path to configuration file")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the proxy web server")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")

    fetch_parser = subparsers.add_parser("fetch", help="Fetch hydrological data for a location")
    fetch_parser.add_argument("--lat", type=float, required=True, help="Latitude")
    fetch_parser.add_argument("--lng", type=float, required=True, help="Longitude")
    fetch_parser.add_argument("--days", type=int, default=None, help="Number of days")

    health_parser = subparsers.add_parser("health", help="Check a running proxy")
    health_parser.add_argument("--url", default=None, help="Proxy base URL")
    health_parser.add_argument("--timeout-ms", type=float, default=None, help="Health check deadline")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(2)

    try:
        app = HydrologyProxyApp(config_file=args.config, log_level=args.log_level)

        if args.command == "serve":
            app.serve(host=args.host, port=args.port)
        elif args.command == "fetch":
            result = app.fetch(args.lat, args.lng, args.days)
            print(json.dumps(result, indent=2, ensure_ascii=False))
        elif args.command == "health":
            sys.exit(0 if app.check_health(args.url, args.timeout_ms) else 1)

    except ValidationError as e:
        print(f"Invalid input: {e}")
        sys.exit(2)

    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

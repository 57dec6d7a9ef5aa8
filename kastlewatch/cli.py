"""Command line entry point: run the controller, the worker, or print the CRDs."""
import argparse
import sys
from typing import List, Optional

import kopf
import yaml
from dotenv import load_dotenv
from loguru import logger

from .crd import build_crd
from .handlers import configure_operator, register_handlers, shutdown_operator
from .resources import RESOURCE_KINDS
from .utils.config import Config
from .worker import run_worker


def configure_logging(config: Config) -> None:
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)
    if config.log_file:
        logger.add(config.log_file, rotation="1 day", retention="7 days", level=config.log_level)


def run_controller(config: Config, namespaces: Optional[List[str]] = None, liveness: Optional[str] = None) -> None:
    """Run the kopf operator watching every resource kind."""

    @kopf.on.startup()
    async def startup(settings: kopf.OperatorSettings, memo: kopf.Memo, **kwargs):
        await configure_operator(settings, memo, app_config=config)

    @kopf.on.cleanup()
    async def cleanup(memo: kopf.Memo, **kwargs):
        await shutdown_operator(memo)

    register_handlers()

    kopf.configure(verbose=config.log_level.upper() == "DEBUG")
    logger.info("Starting KastleWatch controller")
    kopf.run(
        standalone=True,
        clusterwide=not namespaces,
        namespaces=namespaces or (),
        liveness_endpoint=liveness,
    )


def generate_crds() -> str:
    """All CRDs as a YAML stream."""
    return yaml.safe_dump_all([build_crd(kind) for kind in RESOURCE_KINDS], sort_keys=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kastlewatch",
        description="Monitor TCP and HTTP endpoints declared as Kubernetes resources",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    controller = subparsers.add_parser("controller", help="Runs the controller")
    controller.add_argument(
        "--namespace", "-n", action="append", dest="namespaces",
        help="Namespace to watch (repeatable). Watches the whole cluster if omitted",
    )
    controller.add_argument("--liveness", help="Liveness endpoint, e.g. http://0.0.0.0:8080/healthz")

    worker = subparsers.add_parser("worker", help="Runs the worker")
    worker.add_argument("--host", help="Interface to bind to")
    worker.add_argument("--port", type=int, help="Port to listen on")

    subparsers.add_parser("crdgen", help="Generates CRD YAML")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "crdgen":
        print(generate_crds(), end="")
        return 0

    load_dotenv()
    config = Config()
    configure_logging(config)

    if args.command == "controller":
        run_controller(config, namespaces=args.namespaces, liveness=args.liveness)
    elif args.command == "worker":
        run_worker(config, host=args.host, port=args.port)
    return 0

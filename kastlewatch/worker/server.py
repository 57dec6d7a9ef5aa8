"""
Worker HTTP server.

Accepts serialized monitor instances from the controller and schedules the
worker pipeline for each one in the background. A request is answered as
soon as the work is scheduled, not when it completes.
"""
import asyncio
import json
from typing import Optional, Sequence, Set, Type

from aiohttp import web
from loguru import logger
from pydantic import ValidationError

from ..clients import KubernetesClient, load_kubernetes_config
from ..context import Context
from ..resources import MONITOR_KINDS, MonitorResource
from ..utils.config import Config
from .pipeline import WorkerPipeline

PIPELINE_KEY = web.AppKey("pipeline", WorkerPipeline)
TASKS_KEY = web.AppKey("tasks", set)


def worker_path(kind: Type[MonitorResource]) -> str:
    return f"/{kind.VERSION}/{kind.KIND.lower()}"


async def health_handler(request: web.Request) -> web.Response:
    return web.Response(text="OK")


def _ingress_handler(kind: Type[MonitorResource]):
    async def handle(request: web.Request) -> web.Response:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Rejected {kind.KIND} submission with invalid JSON: {e}")
            return web.Response(status=400, text=f"Invalid JSON: {e}")

        try:
            monitor = kind.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Rejected invalid {kind.KIND} submission: {e}")
            return web.Response(status=400, text=str(e))

        pipeline = request.app[PIPELINE_KEY]
        tasks: Set[asyncio.Task] = request.app[TASKS_KEY]
        task = asyncio.create_task(pipeline.process(monitor))
        tasks.add(task)
        task.add_done_callback(tasks.discard)

        logger.debug(f"Scheduled {kind.KIND} {monitor.namespace}/{monitor.name}")
        return web.Response(text="OK")

    return handle


async def _cancel_pending_tasks(app: web.Application) -> None:
    tasks = list(app[TASKS_KEY])
    for task in tasks:
        task.cancel()
    if tasks:
        logger.info(f"Cancelling {len(tasks)} pending check(s)")
        await asyncio.gather(*tasks, return_exceptions=True)


def create_app(pipeline: WorkerPipeline, kinds: Sequence[Type[MonitorResource]] = MONITOR_KINDS) -> web.Application:
    """Build the worker application with one ingress route per monitor kind."""
    app = web.Application()
    app[PIPELINE_KEY] = pipeline
    app[TASKS_KEY] = set()

    app.router.add_get("/healthz", health_handler)
    app.router.add_get("/readyz", health_handler)
    for kind in kinds:
        app.router.add_post(worker_path(kind), _ingress_handler(kind))

    app.on_shutdown.append(_cancel_pending_tasks)
    return app


def run_worker(config: Config, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Run the worker server until interrupted."""
    load_kubernetes_config(config)
    context = Context(config=config, kube=KubernetesClient(config))
    app = create_app(WorkerPipeline(context))

    host = host or config.worker_host
    port = port or config.worker_port
    logger.info(f"Starting KastleWatch worker on {host}:{port}")
    web.run_app(app, host=host, port=port, print=None)

"""Startup and cleanup configuration for the operator."""
import logging

import kopf
from loguru import logger

from ..clients import KubernetesClient, load_kubernetes_config
from ..context import Context
from ..crd import CRDManager
from ..utils.config import Config
from .reconciler import Reconciler


async def configure_operator(settings: kopf.OperatorSettings, memo: kopf.Memo, app_config: Config = None, **_):
    """Configure kopf, connect to the cluster, register CRDs and build the reconciler."""
    app_config = app_config or Config()

    settings.posting.level = logging.INFO
    settings.watching.connect_timeout = 1 * 60
    settings.watching.server_timeout = 10 * 60

    load_kubernetes_config(app_config)

    context = Context(config=app_config, kube=KubernetesClient(app_config))
    await CRDManager(context.kube).init_all()

    memo.context = context
    memo.reconciler = Reconciler(context)

    logger.info(f"Operator configured, dispatching checks to {app_config.controller_base_url}")


async def shutdown_operator(memo: kopf.Memo, **_):
    """Release the reconciler's HTTP session."""
    reconciler = getattr(memo, 'reconciler', None)
    if reconciler is not None:
        await reconciler.close()
    logger.info("Operator stopped")

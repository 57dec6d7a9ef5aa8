"""Kopf handlers for every KastleWatch resource kind."""
import kopf

from ..exceptions import InvalidResourceError
from ..resources import RESOURCE_KINDS, parse_resource
from .reconciler import Reconciler


async def reconcile_loop(body, memo, stopped, logger, **kwargs):
    """Reconcile an instance, then wait until it is due again. One loop runs per instance."""
    reconciler: Reconciler = memo.reconciler
    namespace = body['metadata'].get('namespace')
    name = body['metadata']['name']

    logger.info(f"Watching {body['kind']} {namespace}/{name}")
    while not stopped:
        action = await reconciler.reconcile_body(dict(body))
        logger.debug(f"Revisiting {namespace}/{name} in {action.requeue_after}s")
        await stopped.wait(action.requeue_after)


async def on_spec_change(body, memo, logger, **kwargs):
    """Re-validate and re-check an instance right after its spec changed."""
    reconciler: Reconciler = memo.reconciler
    namespace = body['metadata'].get('namespace')
    name = body['metadata']['name']

    logger.info(f"Spec changed for {body['kind']} {namespace}/{name}")
    try:
        resource = parse_resource(dict(body))
        await reconciler.reconcile(resource, force=True)
    except InvalidResourceError as e:
        raise kopf.PermanentError(str(e)) from e


def register_handlers():
    """Register the handlers of every resource kind. Called once before the operator runs."""
    for kind in RESOURCE_KINDS:
        kopf.on.daemon(kind.GROUP, kind.VERSION, kind.PLURAL, id=f"{kind.PLURAL}-reconcile")(reconcile_loop)
        kopf.on.update(
            kind.GROUP, kind.VERSION, kind.PLURAL, id=f"{kind.PLURAL}-spec", field='spec'
        )(on_spec_change)

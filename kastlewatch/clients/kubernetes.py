"""
Kubernetes API wrapper for the operator and the worker.

The official client is synchronous; every call is run in a worker thread so a
slow API server never blocks other checks running on the event loop.
"""
import asyncio
import base64
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from kubernetes import client, config as kube_config
from kubernetes.client import ApiException
from loguru import logger

from ..exceptions import SecretNotFoundError
from ..utils.config import Config
from ..utils.helpers import build_label_selector


def load_kubernetes_config(app_config: Config) -> None:
    """Load credentials from the configured kubeconfig, in-cluster, or the default kubeconfig."""
    try:
        if app_config.kubeconfig:
            kube_config.load_kube_config(config_file=app_config.kubeconfig)
            logger.info(f"Loaded Kubernetes configuration from {app_config.kubeconfig}")
        else:
            try:
                kube_config.load_incluster_config()
                logger.info("Loaded in-cluster Kubernetes configuration")
            except kube_config.ConfigException:
                kube_config.load_kube_config()
                logger.info("Loaded local Kubernetes configuration")
    except Exception as e:
        logger.error(f"Failed to load Kubernetes configuration: {e}")
        raise


class KubernetesClient:
    """Async facade over the Kubernetes API calls KastleWatch needs."""

    def __init__(self, config: Optional[Config] = None, api_client: Optional[client.ApiClient] = None):
        self.config = config or Config()
        self.api_client = api_client or client.ApiClient()
        self.custom_objects = client.CustomObjectsApi(self.api_client)
        self.core = client.CoreV1Api(self.api_client)
        self.extensions = client.ApiextensionsV1Api(self.api_client)

    async def patch_status(self, kind: Type, namespace: str, name: str, status: Dict[str, Any]) -> Dict[str, Any]:
        """Merge-patch the status subresource of a custom object."""
        return await asyncio.to_thread(
            self.custom_objects.patch_namespaced_custom_object_status,
            group=kind.GROUP,
            version=kind.VERSION,
            namespace=namespace,
            plural=kind.PLURAL,
            name=name,
            body={"status": status},
        )

    async def list_resources(
        self, kind: Type, namespace: str, labels: Optional[Dict[str, str]] = None
    ) -> List[Dict[str, Any]]:
        """List custom objects of a kind in a namespace, filtered by labels."""
        result = await asyncio.to_thread(
            self.custom_objects.list_namespaced_custom_object,
            group=kind.GROUP,
            version=kind.VERSION,
            namespace=namespace,
            plural=kind.PLURAL,
            label_selector=build_label_selector(labels),
        )
        items = result.get('items', [])
        logger.debug(f"Found {len(items)} {kind.KIND} in {namespace} matching {labels}")
        return items

    async def get_secret_value(self, namespace: str, name: str, key: str) -> str:
        """Read one key of a secret as a UTF-8 string."""
        try:
            secret = await asyncio.to_thread(self.core.read_namespaced_secret, name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                raise SecretNotFoundError(namespace, name, key) from e
            raise

        data = secret.data or {}
        if key not in data:
            raise SecretNotFoundError(namespace, name, key)
        return base64.b64decode(data[key]).decode('utf-8')

    async def create_event(
        self,
        namespace: str,
        involved_object: Dict[str, str],
        reason: str,
        message: str,
        event_type: str,
    ) -> None:
        """Create an event about an object."""
        now = datetime.now(timezone.utc)
        event = client.CoreV1Event(
            metadata=client.V1ObjectMeta(generate_name=f"{involved_object['name']}-", namespace=namespace),
            involved_object=client.V1ObjectReference(
                kind=involved_object['kind'],
                name=involved_object['name'],
                namespace=namespace,
                api_version=involved_object['apiVersion'],
                uid=involved_object.get('uid'),
            ),
            reason=reason,
            message=message,
            type=event_type,
            first_timestamp=now,
            last_timestamp=now,
            count=1,
            source=client.V1EventSource(component=self.config.event_component),
        )
        await asyncio.to_thread(self.core.create_namespaced_event, namespace=namespace, body=event)

    async def get_crd(self, name: str) -> Optional[Dict[str, Any]]:
        """Read a CustomResourceDefinition, or None if it is not registered."""
        try:
            crd = await asyncio.to_thread(self.extensions.read_custom_resource_definition, name=name)
        except ApiException as e:
            if e.status == 404:
                return None
            raise
        return self.api_client.sanitize_for_serialization(crd)

    async def create_crd(self, body: Dict[str, Any]) -> None:
        await asyncio.to_thread(self.extensions.create_custom_resource_definition, body=body)

    async def replace_crd(self, name: str, body: Dict[str, Any]) -> None:
        await asyncio.to_thread(self.extensions.replace_custom_resource_definition, name=name, body=body)

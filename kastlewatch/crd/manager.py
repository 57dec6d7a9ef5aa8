"""Register the CRDs of every kind, preserving versions clients may still use."""
import copy
from typing import Any, Dict, Sequence, Type

from loguru import logger

from ..clients import KubernetesClient
from ..resources import RESOURCE_KINDS, ControllerResource
from .schema import build_crd


def merge_crd_versions(new_crd: Dict[str, Any], existing_crd: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge the versions of an already registered CRD into a new one.

    Every version of the new CRD is kept as declared. Versions only present
    in the existing registration are appended so they are never dropped.
    """
    merged = copy.deepcopy(new_crd)
    versions = merged['spec']['versions']
    known = {version['name'] for version in versions}

    for existing_version in existing_crd.get('spec', {}).get('versions', []):
        if existing_version['name'] not in known:
            logger.warning(f"Preserving old version: {existing_version['name']}")
            versions.append(copy.deepcopy(existing_version))
            known.add(existing_version['name'])

    # Only one version may be the storage version.
    declared_storage = {version['name'] for version in new_crd['spec']['versions'] if version.get('storage')}
    if declared_storage:
        for version in versions:
            if version['name'] not in declared_storage:
                version['storage'] = False

    resource_version = existing_crd.get('metadata', {}).get('resourceVersion')
    if resource_version:
        merged.setdefault('metadata', {})['resourceVersion'] = resource_version

    return merged


class CRDManager:
    """Creates or merges the CRDs of the operator's resource kinds."""

    def __init__(self, kube: KubernetesClient):
        self.kube = kube

    async def init_crd(self, crd: Dict[str, Any]) -> Dict[str, Any]:
        """Register a CRD, merging with an existing registration if there is one."""
        name = crd['metadata']['name']
        logger.info(f"Checking CRD: {name}")

        existing = await self.kube.get_crd(name)
        if existing is None:
            logger.info(f"Creating CRD: {name}")
            await self.kube.create_crd(crd)
            logger.info(f"CRD {name} created")
            return crd

        logger.info(f"CRD {name} already exists, merging versions")
        merged = merge_crd_versions(crd, existing)
        await self.kube.replace_crd(name, merged)
        logger.info(f"CRD {name} updated")
        return merged

    async def init_all(self, kinds: Sequence[Type[ControllerResource]] = RESOURCE_KINDS) -> None:
        for kind in kinds:
            await self.init_crd(build_crd(kind))

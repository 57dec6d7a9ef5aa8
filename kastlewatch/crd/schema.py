"""Generate CustomResourceDefinitions from the pydantic models of each kind."""
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from ..models import MonitorStatus
from ..resources import ControllerResource, MonitorResource

_DROPPED_KEYS = {"title", "default"}


def _structural(schema: Dict[str, Any], defs: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a pydantic JSON schema node into a Kubernetes structural schema node."""
    if "$ref" in schema:
        ref_name = schema["$ref"].split("/")[-1]
        resolved = _structural(defs[ref_name], defs)
        if "description" in schema:
            resolved["description"] = schema["description"]
        return resolved

    if "allOf" in schema and len(schema["allOf"]) == 1:
        node = _structural(schema["allOf"][0], defs)
        if "description" in schema:
            node["description"] = schema["description"]
        return node

    if "anyOf" in schema:
        options = [option for option in schema["anyOf"] if option.get("type") != "null"]
        nullable = len(options) != len(schema["anyOf"])
        if len(options) == 1:
            node = _structural(options[0], defs)
            if nullable:
                node["nullable"] = True
            if "description" in schema:
                node["description"] = schema["description"]
            return node

    node: Dict[str, Any] = {}
    for key, value in schema.items():
        if key in _DROPPED_KEYS:
            continue
        if key == "properties":
            node["properties"] = {name: _structural(prop, defs) for name, prop in value.items()}
        elif key in ("items", "additionalProperties") and isinstance(value, dict):
            node[key] = _structural(value, defs)
        elif key in ("exclusiveMinimum", "exclusiveMaximum") and not isinstance(value, bool):
            # OpenAPI v3.0 expresses exclusive bounds as booleans.
            bound = "minimum" if key == "exclusiveMinimum" else "maximum"
            node[bound] = value
            node[key] = True
        elif key != "$defs":
            node[key] = value
    return node


def model_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Structural OpenAPI v3 schema for a pydantic model."""
    schema = model.model_json_schema(by_alias=True)
    return _structural(schema, schema.get("$defs", {}))


def build_crd(kind: Type[ControllerResource], status_model: Optional[Type[BaseModel]] = None) -> Dict[str, Any]:
    """Build the CustomResourceDefinition for a resource kind."""
    spec_model = kind.model_fields["spec"].annotation
    if status_model is None and issubclass(kind, MonitorResource):
        status_model = MonitorStatus

    properties: Dict[str, Any] = {"spec": model_schema(spec_model)}
    version: Dict[str, Any] = {
        "name": kind.VERSION,
        "served": True,
        "storage": True,
    }

    if status_model is not None:
        properties["status"] = model_schema(status_model)
        version["subresources"] = {"status": {}}

    version["schema"] = {
        "openAPIV3Schema": {
            "type": "object",
            "properties": properties,
            "required": ["spec"],
        }
    }

    if issubclass(kind, MonitorResource):
        version["additionalPrinterColumns"] = [
            {"name": "State", "type": "string", "jsonPath": ".status.state"},
            {"name": "Last Checked", "type": "date", "jsonPath": ".status.last_checked"},
            {"name": "Age", "type": "date", "jsonPath": ".metadata.creationTimestamp"},
        ]

    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": kind.crd_name()},
        "spec": {
            "group": kind.GROUP,
            "scope": "Namespaced",
            "names": {
                "kind": kind.KIND,
                "plural": kind.PLURAL,
                "singular": kind.KIND.lower(),
                "shortNames": list(kind.SHORT_NAMES),
            },
            "versions": [version],
        },
    }

"""
Dependency Extraction Module

Helpers processors use to declare that the resource being processed
references another resource (ConfigMaps, Secrets, PVCs, ServiceAccounts).
Namespace defaults to the referencing resource's namespace.
"""

from typing import Any, Dict, Iterable, List

from ..resource import ResourceKey


def reference(kind: str, name: str, namespace: str, group: str = '', version: str = 'v1') -> ResourceKey:
    """Dependency edge to a resource named from within `namespace`"""
    return ResourceKey(group=group, version=version, kind=kind, namespace=namespace, name=name)


def dedupe_dependencies(dependencies: Iterable[ResourceKey]) -> List[ResourceKey]:
    """Drop repeated edges, keeping first-seen order"""
    seen = set()
    unique = []
    for dep in dependencies:
        if dep in seen:
            continue
        seen.add(dep)
        unique.append(dep)
    return unique


def _ref_name(ref: Any, field: str = 'name') -> str:
    if isinstance(ref, dict) and isinstance(ref.get(field), str):
        return ref[field]
    return ''


def env_dependencies(env: List[Any], namespace: str) -> List[ResourceKey]:
    """env[].valueFrom.configMapKeyRef / secretKeyRef"""
    deps = []
    for env_var in env or []:
        if not isinstance(env_var, dict) or not isinstance(env_var.get('valueFrom'), dict):
            continue
        value_from = env_var['valueFrom']

        name = _ref_name(value_from.get('configMapKeyRef'))
        if name:
            deps.append(reference('ConfigMap', name, namespace))

        name = _ref_name(value_from.get('secretKeyRef'))
        if name:
            deps.append(reference('Secret', name, namespace))
    return deps


def env_from_dependencies(env_from: List[Any], namespace: str) -> List[ResourceKey]:
    """envFrom[].configMapRef / secretRef"""
    deps = []
    for source in env_from or []:
        if not isinstance(source, dict):
            continue

        name = _ref_name(source.get('configMapRef'))
        if name:
            deps.append(reference('ConfigMap', name, namespace))

        name = _ref_name(source.get('secretRef'))
        if name:
            deps.append(reference('Secret', name, namespace))
    return deps


def volume_dependencies(volumes: List[Any], namespace: str) -> List[ResourceKey]:
    """ConfigMap, Secret and PVC volumes, including projected sources"""
    deps = []
    for volume in volumes or []:
        if not isinstance(volume, dict):
            continue

        name = _ref_name(volume.get('configMap'))
        if name:
            deps.append(reference('ConfigMap', name, namespace))

        name = _ref_name(volume.get('secret'), 'secretName')
        if name:
            deps.append(reference('Secret', name, namespace))

        name = _ref_name(volume.get('persistentVolumeClaim'), 'claimName')
        if name:
            deps.append(reference('PersistentVolumeClaim', name, namespace))

        projected = volume.get('projected')
        if isinstance(projected, dict):
            for source in projected.get('sources') or []:
                if not isinstance(source, dict):
                    continue
                name = _ref_name(source.get('configMap'))
                if name:
                    deps.append(reference('ConfigMap', name, namespace))
                name = _ref_name(source.get('secret'))
                if name:
                    deps.append(reference('Secret', name, namespace))
    return deps


def pod_spec_dependencies(pod_spec: Dict[str, Any], namespace: str) -> List[ResourceKey]:
    """Every reference found in a pod spec.

    Walks containers and initContainers (env, envFrom), volumes,
    serviceAccountName and imagePullSecrets. The result may contain
    duplicates; the registry dedupes before returning the Result.
    """
    if not isinstance(pod_spec, dict):
        return []

    deps = []
    for container_field in ('initContainers', 'containers'):
        for container in pod_spec.get(container_field) or []:
            if not isinstance(container, dict):
                continue
            deps.extend(env_dependencies(container.get('env'), namespace))
            deps.extend(env_from_dependencies(container.get('envFrom'), namespace))

    deps.extend(volume_dependencies(pod_spec.get('volumes'), namespace))

    service_account = pod_spec.get('serviceAccountName')
    if isinstance(service_account, str) and service_account:
        deps.append(reference('ServiceAccount', service_account, namespace))

    for secret in pod_spec.get('imagePullSecrets') or []:
        name = _ref_name(secret)
        if name:
            deps.append(reference('Secret', name, namespace))

    return deps

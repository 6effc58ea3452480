"""
Kubernetes resource processors
"""
from .configmap import ConfigMapProcessor
from .grafana_dashboard import GrafanaDashboardProcessor
from .secret import SecretProcessor
from .deployment import DeploymentProcessor
from ..registry import ProcessorRegistry


def default_processors():
    """Returns all built-in processors, in registration order."""
    return [
        GrafanaDashboardProcessor(),
        ConfigMapProcessor(),
        SecretProcessor(),
        DeploymentProcessor(),
    ]


def default_registry() -> ProcessorRegistry:
    """Build a new registry holding the built-in processors"""
    registry = ProcessorRegistry()
    for processor in default_processors():
        registry.register(processor)
    return registry


__all__ = [
    'ConfigMapProcessor',
    'GrafanaDashboardProcessor',
    'SecretProcessor',
    'DeploymentProcessor',
    'default_processors',
    'default_registry',
]

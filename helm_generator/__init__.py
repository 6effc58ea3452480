"""
helm-generator

Converts Kubernetes manifests into Helm charts with externalized values.
"""

__version__ = '0.1.0'

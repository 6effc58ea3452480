"""Constants for helm-generator

Centralized location for hardcoded values to improve maintainability.
"""

# Raw values at or above this many bytes are moved to files/
DEFAULT_SIZE_THRESHOLD = 1024

# Directory (relative to chart root) holding externalized values
EXTERNAL_FILES_DIR = 'files'

# Base64 candidates shorter than this are never treated as binary
MIN_BASE64_LENGTH = 16

# Largest integer a float can represent exactly (2**53)
MAX_SAFE_FLOAT_INTEGER = 9007199254740992

# Processor priorities (higher = tried first)
PRIORITY_SPECIALIZED = 110
PRIORITY_DEFAULT = 100
PRIORITY_GENERIC = 80

# Label that marks a ConfigMap as a Grafana sidecar dashboard
GRAFANA_DASHBOARD_LABEL = 'grafana_dashboard'

# Labels tried, in order, when deriving a service name
SERVICE_NAME_LABELS = [
    'app.kubernetes.io/name',
    'app.kubernetes.io/instance',
    'app',
    'name',
    'component',
]

# Kind -> values.yaml key (anything else: lowercase first letter)
KIND_VALUES_KEYS = {
    'Deployment': 'deployment',
    'StatefulSet': 'statefulSet',
    'DaemonSet': 'daemonSet',
    'Service': 'service',
    'Ingress': 'ingress',
    'ConfigMap': 'configMap',
    'Secret': 'secret',
    'PersistentVolumeClaim': 'persistentVolumeClaim',
    'ServiceAccount': 'serviceAccount',
    'Role': 'role',
    'RoleBinding': 'roleBinding',
    'ClusterRole': 'clusterRole',
    'ClusterRoleBinding': 'clusterRoleBinding',
    'HorizontalPodAutoscaler': 'hpa',
    'PodDisruptionBudget': 'pdb',
    'NetworkPolicy': 'networkPolicy',
}

# Kind -> template file name component (anything else: lowercase)
KIND_FILE_NAMES = {
    'PersistentVolumeClaim': 'pvc',
    'HorizontalPodAutoscaler': 'hpa',
    'PodDisruptionBudget': 'pdb',
}

DEFAULT_CONFIG = {
    'chart': {
        'name': 'generated-chart',
        'version': '0.1.0',
        'appVersion': '1.0.0',
        'description': 'A Helm chart generated from Kubernetes manifests',
    },
    'valueProcessor': {
        'sizeThreshold': DEFAULT_SIZE_THRESHOLD,
        'prettyPrint': True,
    },
    'externalFiles': {
        'directory': EXTERNAL_FILES_DIR,
    },
}

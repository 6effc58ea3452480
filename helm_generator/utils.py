"""
Utilities Module

YAML dumping, values.yaml header and dry-run display helpers.
"""

import yaml
from typing import Dict, Any


class OrderedDumper(yaml.SafeDumper):
    """YAML dumper that preserves dictionary order"""
    pass


def dict_representer(dumper, data):
    """Represent dict as ordered mapping"""
    return dumper.represent_mapping(
        yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
        data.items()
    )


def str_representer(dumper, data):
    """Use block style for multi-line strings so values stay readable"""
    if '\n' in data:
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)


OrderedDumper.add_representer(dict, dict_representer)
OrderedDumper.add_representer(str, str_representer)


def dump_yaml(data: Any) -> str:
    return yaml.dump(data, Dumper=OrderedDumper, default_flow_style=False, sort_keys=False,
                     width=120, allow_unicode=True)


def generate_header(chart_name: str, description: str) -> str:
    """Generate header comment for values.yaml.

    Args:
        chart_name: Name of the Helm chart
        description: Chart description

    Returns:
        Header comment string
    """
    return f"""# Default values for {chart_name}
# This is a YAML-formatted file.
# Declare variables to be passed into your templates.

# {description}

# NOTE: This file was auto-generated from Kubernetes manifests.
# Large values live under files/ and are referenced by path.

"""


def print_keys(d: Dict[str, Any], indent: int = 0):
    """Print dictionary keys recursively for dry run output.

    Args:
        d: Dictionary to print
        indent: Current indentation level
    """
    for key, value in d.items():
        if isinstance(value, dict):
            print(' ' * indent + f'- {key}:')
            print_keys(value, indent + 2)
        else:
            print(' ' * indent + f'- {key}: ...')

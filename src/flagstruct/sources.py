"""
Build raw argument lists from mappings and configuration files.

`decode` only understands ``<prefix><name>=<value>`` strings. These helpers turn
a YAML or JSON configuration into that shape so it can be combined with the
process arguments::

    args = sys.argv[1:] + load_args_file("config.yaml")
    decode(config, args)

The first matching argument wins, so arguments placed first take precedence.
"""

import json
import os
from collections.abc import Mapping
from typing import Any

import yaml


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ";".join(_format_value(item) for item in value)
    return str(value)


def args_from_mapping(mapping: Mapping[str, Any], prefix: str = "-") -> list[str]:
    """
    Convert a mapping of flag names to values into raw arguments.

    Nested mappings are flattened by joining the keys with ``-``, so
    ``{"db": {"port": 5432}}`` becomes ``["-db-port=5432"]``. Lists are joined
    with ``;`` and None values are skipped.
    """
    args = []
    for key, value in mapping.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            args.extend(args_from_mapping(value, prefix=f"{prefix}{key}-"))
        else:
            args.append(f"{prefix}{key}={_format_value(value)}")
    return args


def load_args_file(path: str, prefix: str = "-") -> list[str]:
    """
    Load raw arguments from a YAML or JSON file.

    Args:
        path (str): Path to the configuration file.
        prefix (str): Prefix placed before every flag name.

    Returns:
        list[str]: Arguments in ``<prefix><name>=<value>`` form.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file format is not supported or invalid.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found: {path}")

    file_ext = os.path.splitext(path)[1].lower()

    with open(path, "r") as f:
        if file_ext in [".yaml", ".yml"]:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML file: {e}")
        elif file_ext == ".json":
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON file: {e}")
        else:
            raise ValueError(
                f"Unsupported file format: {file_ext}. "
                "Supported formats are: .yaml, .yml, .json"
            )

    if data is None:
        return []
    if not isinstance(data, Mapping):
        raise ValueError(
            f"Configuration file must contain a mapping, got {type(data).__name__}"
        )
    return args_from_mapping(data, prefix=prefix)

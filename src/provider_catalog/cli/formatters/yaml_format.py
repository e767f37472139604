"""YAML output formatter for CLI."""

import json
import sys
from typing import Any, Optional, TextIO

import yaml

from .json import _default_serializer


def format_yaml(data: Any, output: Optional[TextIO] = None) -> None:
    """Format data as YAML and write to output.

    Values YAML cannot represent natively are converted the same way the
    JSON formatter converts them.

    Args:
        data: Data to format
        output: Output stream (defaults to stdout)
    """
    if output is None:
        output = sys.stdout

    plain = json.loads(json.dumps(data, default=_default_serializer))
    output.write(yaml.safe_dump(plain, default_flow_style=False, sort_keys=True, allow_unicode=True))

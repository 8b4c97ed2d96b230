"""
Pattern file handler package.

Handlers register themselves via the @register decorator in registry.py.
See registry.py for details on how to add a new format.
"""

# Import handler modules for their side effects (they register themselves).
from . import json_file as _json_file  # noqa: F401
from . import jsonl as _jsonl  # noqa: F401
from . import registry
from . import yaml_file as _yaml_file  # noqa: F401

__all__ = ["registry"]

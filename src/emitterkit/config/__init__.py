"""
Emitter configuration.

Defaults ship as the ``emitter.yaml`` resource next to this module and can be
overridden from a YAML file and from ``EMITTER_*`` environment variables.
"""
from .loader import EmitterConfig, load_emitter_config

__all__ = ["EmitterConfig", "load_emitter_config"]

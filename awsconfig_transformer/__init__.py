"""Transforms AWS Config change notifications into network-change records.

Exposes:
    Transformer        -- Synchronous notification -> Output records.
    ChangeEventHandler -- Transformer plus delivery through a Reporter.
"""

from awsconfig_transformer.handler import ChangeEventHandler, Transformer

__version__ = "0.1.0"

__all__ = ["ChangeEventHandler", "Transformer", "__version__"]

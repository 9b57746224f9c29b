from .ScimConnector import ScimConnector
from .reconciler import Reconciler

__all__ = [
    "ScimConnector",
    "Reconciler",
]

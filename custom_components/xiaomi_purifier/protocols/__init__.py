"""Protocol interfaces for the Xiaomi purifier integration.

Defines contracts between the sync engine, the transport and the UI layer.
"""

from .api import IPropertyTransport
from .state import IUpdateSink

__all__ = [
    "IPropertyTransport",
    "IUpdateSink",
]

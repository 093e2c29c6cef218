"""Public container API re-exported for external users.

The objects listed in ``__all__`` form the supported public surface for
Python consumers. Everything else in :mod:`qrseal.container` is internal.
"""
from __future__ import annotations

from qrseal.container.codec import COMPRESSION_LEVEL, RecordInfo, deserialize, inspect, serialize
from qrseal.container.format import ContainerRecord, pack_record, unpack_record

__all__ = [
    "COMPRESSION_LEVEL",
    "ContainerRecord",
    "RecordInfo",
    "deserialize",
    "inspect",
    "pack_record",
    "serialize",
    "unpack_record",
]

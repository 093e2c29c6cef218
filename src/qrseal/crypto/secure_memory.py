"""Best-effort wiping of derived key material."""
from __future__ import annotations


def secure_zeroize(data: bytearray | None) -> None:
    """Zero a bytearray in-place.

    Python may still hold copies elsewhere; this only clears the buffer the
    caller owns.
    """
    if data is None:
        return
    length = len(data)
    for i in range(length):
        data[i] = 0
    # Read back to create a data dependency the optimizer can't remove
    if length > 0:
        _ = data[0]

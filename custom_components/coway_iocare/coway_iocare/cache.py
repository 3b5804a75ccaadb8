"""Single-slot cache holding the last good snapshot."""

from __future__ import annotations

import itertools

from .exceptions import CowayIocareDeviceOfflineError
from .snapshot import DeviceSnapshot


class StateCache:
    """Holds the most recent snapshot for one device.

    Writes are whole-snapshot replacements. Each refresh draws a sequence
    number before fetching; a snapshot fetched under an older sequence than the
    cached one is discarded, so a slow poll cannot overwrite a newer forced
    refresh.
    """

    def __init__(self) -> None:
        self._snapshot: DeviceSnapshot | None = None
        self._sequence = itertools.count(1)

    def next_sequence(self) -> int:
        return next(self._sequence)

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def get(self) -> DeviceSnapshot:
        """Return the cached snapshot.

        Raises:
            CowayIocareDeviceOfflineError: If nothing has been cached yet.
        """
        if self._snapshot is None:
            raise CowayIocareDeviceOfflineError("No device status has been received yet")
        return self._snapshot

    def set(self, snapshot: DeviceSnapshot) -> bool:
        """Store a snapshot unless a newer one is already cached.

        Returns:
            True if the snapshot was stored.
        """
        current = self._snapshot
        if current is not None and snapshot.sequence < current.sequence:
            return False
        self._snapshot = snapshot
        return True

class TrackerSyncError(Exception):
    """Base class for every failure the sync engine recovers from."""


class TransportError(TrackerSyncError):
    """Tracker unreachable, timed out, or answered with a non-success status."""


class DecodeError(TrackerSyncError):
    """Tracker answered, but not with the records we expect."""


class ScheduleOrderError(DecodeError):
    """Run orders are duplicated or not contiguous from 1."""


class AssetError(TrackerSyncError):
    """Boxart could not be downloaded or is not an image."""


class NavigationError(TrackerSyncError):
    """No run exists in the requested direction."""

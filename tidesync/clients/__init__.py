"""Service clients for tidesync.

Each client implements one side of the sync contract:
    TidepoolClient   — SourceClient: pump settings, bolus, food, activity
    NightscoutClient — TargetClient: profiles and treatments
"""

from tidesync.clients.base import SourceClient, TargetClient
from tidesync.clients.nightscout import NightscoutClient
from tidesync.clients.tidepool import TidepoolAuthError, TidepoolClient

__all__ = [
    "SourceClient",
    "TargetClient",
    "TidepoolClient",
    "TidepoolAuthError",
    "NightscoutClient",
]

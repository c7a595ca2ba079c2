"""Tidepool → Nightscout transformation and reconciliation.

Modules:
    dedup             — first-wins dedup by timestamp, profile fingerprint matching
    profile_builder   — latest pump settings → Nightscout profile
    treatment_builder — bolus + food + activity → Nightscout treatments
    syncer            — fetch / build / match / write orchestration
"""

from tidesync.sync.profile_builder import build_profile
from tidesync.sync.syncer import Syncer, SyncResult
from tidesync.sync.treatment_builder import build_treatments

__all__ = ["Syncer", "SyncResult", "build_profile", "build_treatments"]

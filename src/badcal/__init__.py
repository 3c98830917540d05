"""Hour-bucket roster reconciliation for shared badminton sessions."""

from badcal.buckets import Advisory, BucketContext, BucketUpdate, set_count_for_bucket
from badcal.config import RosterRules
from badcal.models import Player
from badcal.roster import RosterStore

__version__ = "0.1.0"

__all__ = [
    "Advisory",
    "BucketContext",
    "BucketUpdate",
    "Player",
    "RosterRules",
    "RosterStore",
    "set_count_for_bucket",
]

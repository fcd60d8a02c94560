from .auth import User
from .entries import (
    ApprovableEntryMixin,
    BulkInput,
    DryProcessEntry,
    WashingEntry,
    SubContractEntry,
    GatePassEntry,
)
from .notes import SpecialNote

__all__ = [
    'User',
    'ApprovableEntryMixin',
    'BulkInput', 'DryProcessEntry', 'WashingEntry', 'SubContractEntry', 'GatePassEntry',
    'SpecialNote',
]

"""Data models for birdnest.

This module exports the core data structures used throughout the application.
"""

from birdnest.models.conflict import ConflictCategory, ConflictHandoff, ConflictReport
from birdnest.models.operation import OperationKind, OperationPhase
from birdnest.models.package import (
    DistroFilter,
    FlatpakRecord,
    InstalledPackage,
    InvalidApplicationIdError,
    PackageDetail,
    PackageRecord,
    SourceTag,
    UpgradablePackage,
    validate_application_id,
)

__all__ = [
    "ConflictCategory",
    "ConflictHandoff",
    "ConflictReport",
    "DistroFilter",
    "FlatpakRecord",
    "InstalledPackage",
    "InvalidApplicationIdError",
    "OperationKind",
    "OperationPhase",
    "PackageDetail",
    "PackageRecord",
    "SourceTag",
    "UpgradablePackage",
    "validate_application_id",
]

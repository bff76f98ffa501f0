# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Provisioning Action Enumeration."""

from enum import Enum


class EnumProvisioningAction(str, Enum):
    """What the provisioner did to reach ``PROVISIONED``."""

    CREATED = "created"
    UPDATED = "updated"
    RECREATED = "recreated"


__all__ = ["EnumProvisioningAction"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""OAuth Application Provisioning State Enumeration."""

from enum import Enum


class EnumProvisioningState(str, Enum):
    """States of the OAuth application provisioning state machine.

    Attributes:
        ABSENT: No application with the configured name exists.
        PRESENT: An application with the configured name exists.
        PROVISIONED: The application exists with the desired configuration
            and a freshly captured plaintext secret.
        FAILED: Post-write verification found the record missing.
    """

    ABSENT = "absent"
    PRESENT = "present"
    PROVISIONED = "provisioned"
    FAILED = "failed"


__all__ = ["EnumProvisioningState"]

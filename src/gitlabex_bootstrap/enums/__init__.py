# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Enumerations for the GitLabEx OAuth bootstrap."""

from gitlabex_bootstrap.enums.enum_bootstrap_stage import EnumBootstrapStage
from gitlabex_bootstrap.enums.enum_provisioning_action import EnumProvisioningAction
from gitlabex_bootstrap.enums.enum_provisioning_state import EnumProvisioningState
from gitlabex_bootstrap.enums.enum_response_class import EnumResponseClass

__all__: list[str] = [
    "EnumBootstrapStage",
    "EnumProvisioningAction",
    "EnumProvisioningState",
    "EnumResponseClass",
]

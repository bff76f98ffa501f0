# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Bootstrap Pipeline Stage Enumeration.

Identifies which stage of the sequential bootstrap run raised an error,
so that the log trail names the failing stage.
"""

from enum import Enum


class EnumBootstrapStage(str, Enum):
    """Stages of the bootstrap pipeline, in execution order.

    Attributes:
        CONFIG: Loading and validating the KEY=VALUE config file
        READINESS: Waiting for the GitLab API to answer
        CREDENTIALS: Obtaining a token for the applications API
        PROVISIONING: Running the OAuth application state machine
        PUBLICATION: Writing and verifying the credentials artifact
    """

    CONFIG = "config"
    READINESS = "readiness"
    CREDENTIALS = "credentials"
    PROVISIONING = "provisioning"
    PUBLICATION = "publication"


__all__ = ["EnumBootstrapStage"]

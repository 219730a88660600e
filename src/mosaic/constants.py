"""Mosaic constants shared across registries, routing and boot.

Reserved names here are part of the wire format (persisted snapshots and
action payloads), so changing them breaks compatibility with stored data.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Reserved model / view names
# =============================================================================

#: Pseudo-model hosting framework views (auth, splash) that belong to no model
DEFAULT_MODEL_NAME: str = "__default__"

#: Model under which configuration snapshots are persisted
CONFIG_MODEL_NAME: str = "__config__"

#: View type rendered when authentication is required and missing
AUTH_VIEW_TYPE: str = "auth"

#: View type rendered while the engine boots
SPLASH_VIEW_TYPE: str = "splash"

# =============================================================================
# Container addressing
# =============================================================================

TARGET_SELF: str = "__self__"
TARGET_PARENT: str = "__parent__"
TARGET_ROOT: str = "__root__"

#: Name given to the outermost container scope
ROOT_CONTAINER_NAME: str = TARGET_ROOT

# =============================================================================
# Components
# =============================================================================

#: Suite every widget lookup falls back to
BUILTIN_SUITE_NAME: str = "build-in"
BUILTIN_SUITE_VERSION: str = "0.0.1"

#: Renderer slot shown over every rendered view
VIEW_INSPECTOR_SLOT: str = "view-inspector"

# =============================================================================
# Events
# =============================================================================

#: Emitted after a configuration snapshot is merged into the meta registry
CONFIG_UPDATED_EVENT: str = "config.updated"

# =============================================================================
# Engine
# =============================================================================

Tier = Literal["presentation", "service"]

#: Default HTTP mount point for engine services
DEFAULT_ENDPOINT: str = "/api/ee"

#: Sub-path under the endpoint where servlets are mounted
SERVLET_PATH: str = "/servlet"

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

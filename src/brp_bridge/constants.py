"""
Project-wide constants for the BRP bridge
"""  # noqa: D200, D212, D415

# ==============================================================================
# Network Configuration
# ==============================================================================

DEFAULT_BRP_HOST = "localhost"
DEFAULT_BRP_PORT = 15702
NETWORK_TIMEOUT = 30.0  # seconds
BRP_ENDPOINT_PATH = "/jsonrpc"

# ==============================================================================
# JSON-RPC Wire Format
# ==============================================================================

JSONRPC_VERSION = "2.0"
JSONRPC_DEFAULT_ID = 1
JSONRPC_FIELD = "jsonrpc"
JSONRPC_FIELD_ID = "id"
JSONRPC_FIELD_METHOD = "method"
JSONRPC_FIELD_PARAMS = "params"
JSONRPC_FIELD_RESULT = "result"
JSONRPC_FIELD_ERROR = "error"

# ==============================================================================
# Remote Methods
# ==============================================================================

BRP_METHOD_SPAWN = "bevy/spawn"
BRP_METHOD_INSERT = "bevy/insert"
BRP_METHOD_MUTATE_COMPONENT = "bevy/mutate_component"
BRP_METHOD_INSERT_RESOURCE = "bevy/insert_resource"
BRP_METHOD_MUTATE_RESOURCE = "bevy/mutate_resource"

# Methods whose payloads carry type-keyed values the engine knows how to repair
FORMAT_DISCOVERY_METHODS = frozenset(
    {
        BRP_METHOD_SPAWN,
        BRP_METHOD_INSERT,
        BRP_METHOD_MUTATE_COMPONENT,
        BRP_METHOD_INSERT_RESOURCE,
        BRP_METHOD_MUTATE_RESOURCE,
    }
)

# ==============================================================================
# Recoverable Error Codes
# ==============================================================================

COMPONENT_FORMAT_ERROR_CODE = -23402
RESOURCE_FORMAT_ERROR_CODE = -23501

# ==============================================================================
# Payload Field Names
# ==============================================================================

PARAM_COMPONENTS = "components"
PARAM_COMPONENT = "component"
PARAM_RESOURCE = "resource"
PARAM_VALUE = "value"

# Fields that commonly wrap a bare string value
STRING_WRAPPER_FIELDS = ("name", "value", "text", "label")

# ==============================================================================
# Format Discovery
# ==============================================================================

TIER_DETERMINISTIC = 1
TIER_SERIALIZATION = 2
TIER_GENERIC_FALLBACK = 3

# Transform: translation (Vec3) + rotation (Quat) + scale (Vec3), as reported
# by the remote deserializer's sequence-length error.
TRANSFORM_SEQUENCE_F32_COUNT = 12
TRANSFORM_FIELDS = ("translation", "rotation", "scale")

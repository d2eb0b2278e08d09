"""Application-wide constants for the Kirha MCP gateway."""

# ========================================
# Server Identity
# ========================================

SERVER_NAME = "Kirha MCP"
SERVER_VERSION = "0.1.0"
SERVER_INSTRUCTIONS = "Gateway to premium data providers for real time insights"

# ========================================
# Remote API
# ========================================

KIRHA_BASE_URL_DEFAULT = "https://api.kirha.ai"
TOOLS_ENDPOINT = "/mcp/v1/tools"
TOOLS_PAGE_LIMIT = 99  # Single page, the cursor is not followed

# ========================================
# Network & Timeout Constants
# ========================================

# Timeouts (seconds)
KIRHA_TIMEOUT_DEFAULT = 120
TOOL_CALL_TIMEOUT_DEFAULT = 120
SHUTDOWN_TIMEOUT_DEFAULT = 30

# ========================================
# HTTP Transport
# ========================================

HTTP_HOST_DEFAULT = "0.0.0.0"
HTTP_PORT_DEFAULT = 8022
HTTP_PATH_DEFAULT = "/mcp"

# ========================================
# Wire Translation
# ========================================

RESULT_PARSE_ERROR_TEXT = "Error parsing tool result"

# ========================================
# HTTP Status Codes
# ========================================

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_NOT_FOUND = 404

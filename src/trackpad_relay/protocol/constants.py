# Message type constants (tagged JSON protocol; canonical list lives here)

# client -> server
T_AUTH = "auth"
T_MOVE_TO = "moveTo"
T_MOVE_BY = "moveBy"
T_CLICK = "click"
T_SCROLL = "scroll"

# server -> client (RelayResponse.message)
MSG_AUTHENTICATED = "Authenticated"
MSG_ALREADY_AUTHENTICATED = "Already authenticated"
MSG_AUTH_REQUIRED = "Authentication required"
MSG_INVALID_TOKEN = "Invalid token"
MSG_INVALID_FORMAT = "Invalid message format"

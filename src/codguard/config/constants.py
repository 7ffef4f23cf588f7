"""
Centralized application constants.

Single point of truth for endpoint paths, timeouts and store keys shared by
the checkout gate and the bundled order sync.
"""

# ==============================================================================
# CODGUARD API
# ==============================================================================

CUSTOMER_RATING_PATH = "/api/customer-rating/{shop_id}/{email}"
FEEDBACK_PATH = "/api/feedback"
ORDER_IMPORT_PATH = "/api/orders/import"

# Request timeouts (seconds)
RATING_TIMEOUT_SECONDS = 10.0
FEEDBACK_TIMEOUT_SECONDS = 5.0
ORDER_IMPORT_TIMEOUT_SECONDS = 30.0

# Rating assumed for customers the API does not know yet (HTTP 404)
UNKNOWN_CUSTOMER_RATING = 1.0

# Status codes accepted from the order import endpoint
ORDER_IMPORT_SUCCESS_CODES = (200, 201)

# ==============================================================================
# BUNDLED ORDER SYNC
# ==============================================================================

# Scheduled task that flushes the order queue
SEND_TASK_NAME = "codguard_send_bundled_orders"

# Delay between the first queued order and the bundled send (1 hour)
BUNDLE_DELAY_SECONDS = 3600

# Safety-net expiry of the persisted queue (24 hours)
QUEUE_TTL_SECONDS = 86400

# Number of flush attempts kept for the dashboard
SYNC_HISTORY_LIMIT = 20

# Outcome codes reported per order
OUTCOME_SUCCESSFUL = "1"
OUTCOME_REFUSED = "-1"

# ==============================================================================
# BLOCK STATISTICS
# ==============================================================================

BLOCK_LOG_RETENTION_DAYS = 90

# ==============================================================================
# STORE KEYS
# ==============================================================================

SETTINGS_KEY = "codguard:settings"
QUEUE_KEY = "codguard:order_queue"
BLOCK_EVENTS_KEY = "codguard:block_events"
SYNC_HISTORY_KEY = "codguard:sync_history"

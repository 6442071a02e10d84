"""Application-wide constants for the FitClub booking backend."""

BRAND_NAME = "FitClub"
API_VERSION = "1.0.0"

# Simulated checkout (no gateway integration)
SIMULATED_PAYMENT_METHOD = "credit card"
SUBSCRIPTION_DESCRIPTION_TEMPLATE = "Subscription: {package_name}"

# Reminder copy written onto pending notifications
REMINDER_MESSAGE_TEMPLATE = "Reminder: {class_name} starts at {start_time} on {class_date}"

# Date/time wire formats
DATE_FORMAT = "%Y-%m-%d"
SLOT_LABEL_FORMAT = "%H:%M"

# Schedule weekday numbering: 0 = Sunday ... 6 = Saturday
DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500

# Admin member views
MEMBER_DETAIL_BOOKING_LIMIT = 50
NEW_MEMBER_WINDOW_DAYS = 30

# Operations slower than this are logged as warnings by BaseService
SLOW_OPERATION_SECONDS = 1.0

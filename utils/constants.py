"""
utils/constants.py

Purpose: Centralized static content

- WhatsApp message templates for orders and confirmations
- Client-facing response messages
- Messaging limits and provider error codes

(Prevents hardcoding across the codebase)
"""

# ============================================================
# LIMITS
# ============================================================

# WhatsApp text body ceiling
MAX_MESSAGE_LENGTH = 4096

# ============================================================
# DRY CLEANER NOTIFICATION
# ============================================================

NEW_ORDER_HEADER = "🧺 *NEW PICKUP ORDER*"

NEW_ORDER_DETAILS = """📋 *Customer:* {customer_name}
📍 *Address:* {pickup_address}
⏰ *Preferred Pickup:* {pickup_time}"""

NEW_ORDER_ITEMS = "📦 *Items:*\n{items}"

NEW_ORDER_ITEM_LINE = "  • {quantity}x {name}"

NEW_ORDER_NOTES = "📝 *Notes:*\n{notes}"

NEW_ORDER_FOOTER = "_Order received at {received_at}_"

PICKUP_TIME_NOT_SPECIFIED = "Not specified"

# ============================================================
# CUSTOMER CONFIRMATION
# ============================================================

CUSTOMER_CONFIRMATION_MESSAGE = """✅ *Order Confirmed*

Hi {customer_name}! 👋

Thank you for choosing {business_name}! Your pickup order has been received.

📅 *Scheduled Pickup:* {pickup_time}

We'll send you a reminder before pickup. If you need to make any changes, please contact us.

Thank you! 🙏"""

CONFIRMATION_TIME_NOT_SPECIFIED = "your preferred time"

# ============================================================
# WEBSITE CONTACT
# ============================================================

DEFAULT_INQUIRY_MESSAGE = "Hello! I'd like to book a laundry service. Can you help me?"

# ============================================================
# API RESPONSES
# ============================================================

ORDER_SUBMITTED_MESSAGE = "Order submitted successfully"

ORDER_FORWARD_FAILED_MESSAGE = (
    "We could not forward your order to our team right now. "
    "Please contact support and quote order ID {order_id}."
)

GENERIC_ERROR_MESSAGE = "An internal error occurred. Please try again later."

# ============================================================
# PROVIDER ERROR CODES
# ============================================================

# Meta: recipient phone number not in allowed list
META_NOT_ALLOWED_CODES = {131030, 131031}
# Meta: OAuth / access token problems
META_AUTH_CODES = {0, 190}
# Meta: invalid parameter
META_INVALID_REQUEST_CODES = {100, 131008, 131009}

# Twilio: authentication failed
TWILIO_AUTH_CODES = {20003}
# Twilio: invalid To / From, channel not found
TWILIO_INVALID_REQUEST_CODES = {21211, 21212, 21606, 63007}
# Twilio: WhatsApp sandbox recipient has not joined
TWILIO_NOT_ALLOWED_CODES = {63015}

NOT_ALLOWED_MARKER = "not in allowed list"

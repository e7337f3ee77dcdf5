"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any formula or business rule that references a numeric constant should
import it from here instead of hardcoding.  This avoids drift between
apps that use the same value.
"""

# ── Contact-unlock fee schedule (BDT) ───────────────────────────────
# Flat two-tier schedule keyed on the listed book price:
#     fee = UNLOCK_FEE_HIGH if price >= UNLOCK_FEE_THRESHOLD else UNLOCK_FEE_LOW
UNLOCK_FEE_THRESHOLD: int = 500
UNLOCK_FEE_LOW: int = 10
UNLOCK_FEE_HIGH: int = 20

# Minimum number of digits in a bKash (mobile wallet) number.
BKASH_NUMBER_MIN_LENGTH: int = 11

# Prefix of the human-facing receipt id attached to every unlock payment.
TRANSACTION_NUMBER_PREFIX: str = "TXN"

# ── Notifications ───────────────────────────────────────────────────
# Page size of the recipient's notification list.
NOTIFICATION_LIST_LIMIT: int = 50

# Subject prefix of the admin mailbox side-channel.
ADMIN_ALERT_SUBJECT_PREFIX: str = "[Boi Rajjo]"

# ── Reference number prefixes ───────────────────────────────────────
ORDER_NUMBER_PREFIX: str = "ORD"
DEMAND_NUMBER_PREFIX: str = "DEM"
SHOP_ORDER_NUMBER_PREFIX: str = "NLK"

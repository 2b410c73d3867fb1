"""Notifications bounded context — notification records and delivery preferences.

Persists notifications addressed to users and tracks their read/sent state.
Resolves, per user and per notification category, which delivery channels
apply and whether delivery is currently suppressed by quiet hours.
Dispatching to email/SMS/push providers happens elsewhere.
"""

from protean.domain import Domain

from notifications.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

notifications = Domain(name="notifications")

from coinhub.models.user import User, UserStatus  # noqa: F401
from coinhub.models.coin_transaction import CoinTransaction, TransactionKind  # noqa: F401
from coinhub.models.topup_request import TopupRequest, TopupStatus  # noqa: F401
from coinhub.models.notification import AdminNotification, NotificationKind  # noqa: F401

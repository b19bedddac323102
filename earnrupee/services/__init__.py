from .earning_service import EarningService
from .withdrawal_service import WithdrawalService, validate_payment_details
from .aggregator import get_todays_stats, get_recent_earnings, get_transaction_history, get_platform_stats
from .tokens import revoke_token, is_token_revoked, purge_expired_tokens
from .scheduler import init_scheduler, roll_daily_counters, purge_revoked_tokens

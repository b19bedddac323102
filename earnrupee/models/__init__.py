# Models package
from .account import Account, AccountRole
from .ad import Ad, AdType, AdView
from .withdrawal import Withdrawal, WithdrawalStatus, PaymentMethod
from .token import RevokedToken

import uuid
from enum import Enum
from sqlalchemy import Numeric, Text, CheckConstraint

from earnrupee import db
from earnrupee.utils.clock import utcnow
from earnrupee.utils.money import money_str


class PaymentMethod(Enum):
    UPI = "upi"
    BANK = "bank"
    PAYTM = "paytm"
    PAYPAL = "paypal"


class WithdrawalStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Withdrawal(db.Model):
    """A request to convert available balance into an off-platform payment"""
    __tablename__ = 'withdrawals'
    __table_args__ = (
        CheckConstraint('amount > 0', name='ck_withdrawals_amount_positive'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = db.Column(db.String(36), db.ForeignKey('accounts.id'), nullable=False, index=True)
    amount = db.Column(Numeric(10, 2), nullable=False)
    payment_method = db.Column(db.Enum(PaymentMethod), nullable=False)
    payment_details = db.Column(Text, nullable=False)   # bank: holder|account number|IFSC|bank name
    status = db.Column(db.Enum(WithdrawalStatus), default=WithdrawalStatus.PENDING, nullable=False, index=True)
    requested_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    processed_at = db.Column(db.DateTime, nullable=True)
    # Set while a failed withdrawal's amount sits back in the available balance
    refunded_at = db.Column(db.DateTime, nullable=True)

    account = db.relationship('Account', backref=db.backref('withdrawals', lazy='dynamic'))

    def __init__(self, account_id, amount, payment_method, payment_details):
        self.account_id = account_id
        self.amount = amount
        self.payment_method = payment_method
        self.payment_details = payment_details
        self.status = WithdrawalStatus.PENDING
        self.requested_at = utcnow()

    def to_dict(self, include_account=False):
        data = {
            'id': self.id,
            'account_id': self.account_id,
            'amount': money_str(self.amount),
            'payment_method': self.payment_method.value,
            'payment_details': self.payment_details,
            'status': self.status.value,
            'requested_at': self.requested_at.isoformat() if self.requested_at else None,
            'processed_at': self.processed_at.isoformat() if self.processed_at else None,
            'refunded_at': self.refunded_at.isoformat() if self.refunded_at else None
        }
        if include_account:
            data['account'] = {
                'username': self.account.username,
                'email': self.account.email
            } if self.account else None
        return data

    def __repr__(self):
        return f'<Withdrawal ₹{self.amount} - {self.status.value}>'

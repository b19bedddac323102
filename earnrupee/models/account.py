import uuid
import bcrypt
from enum import Enum
from sqlalchemy import Numeric, CheckConstraint

from earnrupee import db
from earnrupee.utils.clock import utcnow, yesterday
from earnrupee.utils.money import money_str


class AccountRole(Enum):
    USER = "user"
    ADMIN = "admin"


class Account(db.Model):
    """A user's earning identity and balance ledger"""
    __tablename__ = 'accounts'
    __table_args__ = (
        CheckConstraint('total_earnings >= 0', name='ck_accounts_total_earnings_non_negative'),
        CheckConstraint('available_balance >= 0', name='ck_accounts_available_balance_non_negative'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    total_earnings = db.Column(Numeric(10, 2), default=0, nullable=False)
    available_balance = db.Column(Numeric(10, 2), default=0, nullable=False)
    ads_watched_today = db.Column(db.Integer, default=0, nullable=False)
    current_streak = db.Column(db.Integer, default=0, nullable=False)
    last_earned_on = db.Column(db.Date, nullable=True)
    role = db.Column(db.Enum(AccountRole), default=AccountRole.USER, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    bio = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __init__(self, username, email, password, role=AccountRole.USER):
        self.username = username
        self.email = email
        self.password_hash = self._hash_password(password)
        self.role = role
        self.total_earnings = 0
        self.available_balance = 0
        self.ads_watched_today = 0
        self.current_streak = 0
        self.is_active = True

    def _hash_password(self, password):
        """Hash password using bcrypt"""
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def set_password(self, password):
        self.password_hash = self._hash_password(password)

    def check_password(self, password):
        """Check if provided password matches the hash"""
        if not self.password_hash or not password:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def is_admin(self):
        return self.role == AccountRole.ADMIN

    def effective_streak(self):
        """Streak as of today; a streak whose last earning day is before yesterday is broken"""
        if self.last_earned_on is None or self.last_earned_on < yesterday():
            return 0
        return self.current_streak

    def to_dict(self):
        """Convert account to dictionary (excluding password)"""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'total_earnings': money_str(self.total_earnings),
            'available_balance': money_str(self.available_balance),
            'ads_watched_today': self.ads_watched_today,
            'current_streak': self.current_streak,
            'last_earned_on': self.last_earned_on.isoformat() if self.last_earned_on else None,
            'role': self.role.value,
            'is_active': self.is_active,
            'bio': self.bio,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Account {self.username}>'

import uuid
from enum import Enum
from sqlalchemy import Numeric, CheckConstraint

from earnrupee import db
from earnrupee.utils.clock import utcnow
from earnrupee.utils.money import money_str


class AdType(Enum):
    VIDEO = "video"
    BANNER = "banner"
    INTERACTIVE = "interactive"


class Ad(db.Model):
    """A watchable catalog entry with a fixed reward"""
    __tablename__ = 'ads'
    __table_args__ = (
        CheckConstraint('duration > 0', name='ck_ads_duration_positive'),
        CheckConstraint('reward > 0', name='ck_ads_reward_positive'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(255), nullable=False)
    type = db.Column(db.Enum(AdType), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    reward = db.Column(Numeric(10, 2), nullable=False)
    network_code = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type.value,
            'category': self.category,
            'duration': self.duration,
            'reward': money_str(self.reward),
            'network_code': self.network_code,
            'is_active': self.is_active
        }

    def __repr__(self):
        return f'<Ad {self.title}>'


class AdView(db.Model):
    """One account's attempt to watch one ad; the unit of credit"""
    __tablename__ = 'ad_views'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    account_id = db.Column(db.String(36), db.ForeignKey('accounts.id'), nullable=False, index=True)
    ad_id = db.Column(db.String(36), db.ForeignKey('ads.id'), nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    # Snapshots taken at start; later ad edits never change what this view pays
    reward = db.Column(Numeric(10, 2), nullable=False)
    required_seconds = db.Column(db.Integer, default=0, nullable=False)
    viewed_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    account = db.relationship('Account', backref=db.backref('ad_views', lazy='dynamic'))
    ad = db.relationship('Ad', backref=db.backref('views', lazy='dynamic'))

    def __init__(self, account_id, ad_id, reward, required_seconds=0):
        self.account_id = account_id
        self.ad_id = ad_id
        self.reward = reward
        self.required_seconds = required_seconds
        self.completed = False
        self.viewed_at = utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'account_id': self.account_id,
            'ad_id': self.ad_id,
            'completed': self.completed,
            'reward': money_str(self.reward),
            'required_seconds': self.required_seconds,
            'viewed_at': self.viewed_at.isoformat() if self.viewed_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None
        }

    def __repr__(self):
        return f'<AdView {self.id} completed={self.completed}>'

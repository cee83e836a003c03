# models.py
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Index, UniqueConstraint

from domain.policies import Tier

db = SQLAlchemy()


def utcnow():
    # NOTE: naive UTC 전제 (DB timezone=False)
    return datetime.utcnow()


# =========================
#       Core: Users
# =========================
class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    # 외부 인증 식별자 (session["user"]["user_id"])
    user_id = db.Column(db.String(255), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(50), nullable=True)

    is_admin = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


# =========================
#   Subscriptions (Stripe 동기화)
# =========================
class Subscription(db.Model):
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(255), nullable=False, unique=True, index=True)

    tier = db.Column(db.String(32), nullable=False, default=Tier.FREE.value, index=True)
    status = db.Column(db.String(32), nullable=False, default="active", index=True)
    billing_period = db.Column(db.String(16), nullable=False, default="monthly")

    stripe_customer_id = db.Column(db.String(64), nullable=True, index=True)
    stripe_subscription_id = db.Column(db.String(64), nullable=True, index=True)

    current_period_start = db.Column(db.DateTime, nullable=True)
    current_period_end = db.Column(db.DateTime, nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_sub_user_status", "user_id", "status"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "tier": self.tier,
            "status": self.status,
            "billing_period": self.billing_period,
            "current_period_start": self.current_period_start.isoformat() if self.current_period_start else None,
            "current_period_end": self.current_period_end.isoformat() if self.current_period_end else None,
        }


# =========================
#    DailyUsage (free, 일간)
# =========================
class DailyUsage(db.Model):
    __tablename__ = "daily_usage"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    search_count = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_usage_user_date"),
    )


# =========================
#    MonthlyUsage (lite, 월간)
# =========================
class MonthlyUsage(db.Model):
    __tablename__ = "monthly_usage"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(255), nullable=False, index=True)
    # 해당 월 1일
    month = db.Column(db.Date, nullable=False, index=True)
    search_count = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "month", name="uq_monthly_usage_user_month"),
    )

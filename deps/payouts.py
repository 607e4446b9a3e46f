# deps/payouts.py
from app.providers.base import PayoutSender
from app.providers.factory import get_payout_sender


def get_sender() -> PayoutSender:
    return get_payout_sender()

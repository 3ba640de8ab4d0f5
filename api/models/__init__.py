from models.user import User
from models.subscription import Subscription, SubscriptionDelivery

__all__ = ["User", "Subscription", "SubscriptionDelivery"]

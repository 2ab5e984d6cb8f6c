"""Notification kinds and the categories the client groups them by."""

from enum import Enum


class NotificationType(Enum):
    ORDER_STATUS_CHANGED = "OrderStatusChanged"
    CANCELLATION_APPROVED = "CancellationApproved"
    CANCELLATION_DECLINED = "CancellationDeclined"
    PENALTY_ASSIGNED = "PenaltyAssigned"


class NotificationCategory(Enum):
    ACCOUNT = "account"
    ORDER = "order"
    ADMIN = "admin"
    PENALTY = "penalty"
    SECURITY = "security"

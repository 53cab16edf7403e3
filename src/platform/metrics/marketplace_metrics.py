from prometheus_client import Counter, Histogram


class MarketplaceMetrics:
    """
    Business metrics for the reservation, payment and notification flows.

    Exposed on /metrics through prometheus_client's default registry.
    """

    def __init__(self) -> None:
        # ========== Reservation Metrics ==========
        self.reservations_created = Counter(
            'marketplace_reservations_created_total',
            'Reservations created',
            ['channel'],  # channel: direct/payment
        )

        self.reservations_canceled = Counter(
            'marketplace_reservations_canceled_total',
            'Reservations canceled',
            ['canceled_by_role'],
        )

        self.slot_conflicts = Counter(
            'marketplace_slot_conflicts_total',
            'Reservation attempts rejected because the slot was taken or blocked',
            ['reason'],
        )

        # ========== Payment Metrics ==========
        self.payment_operations = Counter(
            'marketplace_payment_operations_total',
            'Payment gateway operations',
            ['operation', 'result'],  # operation: confirm/cancel
        )

        self.payment_gateway_duration = Histogram(
            'marketplace_payment_gateway_duration_seconds',
            'Payment gateway round-trip time',
            ['operation'],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        )

        # ========== Notification Metrics ==========
        self.notifications_delivered = Counter(
            'marketplace_notifications_delivered_total',
            'Notifications stored for a recipient',
            ['type'],
        )

        self.event_listener_failures = Counter(
            'marketplace_event_listener_failures_total',
            'Domain event listeners that raised',
            ['event'],
        )


# Module-level singleton: prometheus collectors may only be registered once
marketplace_metrics = MarketplaceMetrics()

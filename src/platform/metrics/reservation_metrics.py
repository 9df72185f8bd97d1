from prometheus_client import Counter, Gauge, Histogram


class ReservationMetrics:
    """
    Reservation Lifecycle Metrics Collector

    Tracks booking outcomes, ticket status transitions and the expiry sweeper
    """

    def __init__(self):
        # ========== Booking Metrics ==========
        self.booking_requests = Counter(
            'booking_requests_total',
            'Total booking requests',
            ['event_id', 'result'],  # result: success/inactive/ended/insufficient/error
        )

        self.booking_duration = Histogram(
            'booking_duration_seconds',
            'Booking processing time',
            ['event_id'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.tickets_reserved = Counter(
            'tickets_reserved_total', 'Tickets placed on hold', ['event_id']
        )

        # ========== Ticket Lifecycle Metrics ==========
        self.ticket_transitions = Counter(
            'ticket_transitions_total',
            'Persisted ticket status transitions',
            ['from_status', 'to_status'],
        )

        self.payments_confirmed = Counter(
            'payments_confirmed_total', 'Tickets moved to paid by payment confirmation'
        )

        # ========== Sweeper Metrics ==========
        self.sweeper_runs = Counter(
            'reservation_sweeper_runs_total',
            'Sweeper passes',
            ['result'],  # result: success/error
        )

        self.sweeper_reclaimed = Counter(
            'reservation_sweeper_reclaimed_total', 'Expired holds returned to inventory'
        )

        self.sweeper_duration = Histogram(
            'reservation_sweeper_duration_seconds',
            'Sweeper pass duration',
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
        )

        self.sweeper_last_run = Gauge(
            'reservation_sweeper_last_run_timestamp_seconds', 'Unix time of the last sweeper pass'
        )

    # ========== Helper Methods ==========

    def record_booking(self, *, event_id: int, result: str, quantity: int, duration: float):
        self.booking_requests.labels(event_id=event_id, result=result).inc()
        self.booking_duration.labels(event_id=event_id).observe(duration)
        if result == 'success':
            self.tickets_reserved.labels(event_id=event_id).inc(quantity)

    def record_transition(self, *, from_status: str, to_status: str):
        self.ticket_transitions.labels(from_status=from_status, to_status=to_status).inc()

    def record_payment_confirmed(self, *, count: int):
        if count:
            self.payments_confirmed.inc(count)

    def record_sweep(self, *, result: str, reclaimed: int, duration: float):
        self.sweeper_runs.labels(result=result).inc()
        if reclaimed:
            self.sweeper_reclaimed.inc(reclaimed)
        self.sweeper_duration.observe(duration)
        self.sweeper_last_run.set_to_current_time()


# Global metrics instance
metrics = ReservationMetrics()

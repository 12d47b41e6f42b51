"""Prometheus metrics for monitoring loan submissions, funding and credit score movement"""

from prometheus_client import Counter, Histogram

# Submission metrics
submission_counter = Counter(
    "adanfo_loan_submissions_total",
    "Loan requests submitted to the pool",
    ["outcome"],  # accepted | ineligible | invalid
)

rate_tier_counter = Counter(
    "adanfo_interest_rate_tier",
    "Accepted loan requests by interest rate tier",
    ["tier"],  # 8% | 10% | 12% | 13%+
)

# Funding metrics
funding_counter = Counter(
    "adanfo_funding_attempts_total",
    "Lender funding attempts",
    ["outcome"],  # funded | conflict | invalid | not_found
)

# Credit ledger metrics
score_update_counter = Counter(
    "adanfo_score_updates_total",
    "Credit score recomputations",
    ["direction"],  # up | down | unchanged
)

# Verifier API metrics
verifier_fetch_failures_counter = Counter(
    "verifier_fetch_failures_total",
    "Failed academic verifier calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_submission(outcome: str, interest_rate: float | None = None) -> None:
    """Record submission outcome and, for accepted requests, the rate tier"""
    submission_counter.labels(outcome=outcome).inc()

    if interest_rate is None:
        return

    if interest_rate <= 8:
        tier = "8%"
    elif interest_rate <= 10:
        tier = "10%"
    elif interest_rate <= 12:
        tier = "12%"
    else:
        tier = "13%+"

    rate_tier_counter.labels(tier=tier).inc()


def record_score_update(previous_score: int, new_score: int) -> None:
    if new_score > previous_score:
        direction = "up"
    elif new_score < previous_score:
        direction = "down"
    else:
        direction = "unchanged"
    score_update_counter.labels(direction=direction).inc()

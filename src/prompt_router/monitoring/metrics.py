"""Custom Prometheus metrics for the prompt router.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- dispatch_requests_total (high error rate per provider)
- dispatch_latency_seconds (slow upstream providers)
"""

from prometheus_client import Counter, Histogram

# === Classification Metrics ===

classification_total = Counter(
    "classification_total",
    "Total prompts classified by routing category",
    ["category"],
)
"""
Classification counter by category.

Labels:
- category: coding, reasoning, creative, fast

Used to spot drift in the traffic mix and to size per-category targets.
"""

# === Dispatch Metrics ===

dispatch_requests_total = Counter(
    "dispatch_requests_total",
    "Total dispatches by provider and outcome",
    ["provider", "outcome"],
)
"""
Dispatch outcome counter.

Labels:
- provider: openai, anthropic, google, groq
- outcome: success, or the normalized error kind (RATE_LIMIT_ERROR, TIMEOUT_ERROR, ...)

Alert thresholds:
- WARN: non-success rate > 5% per provider
- CRITICAL: non-success rate > 20% per provider
"""

dispatch_latency_seconds = Histogram(
    "dispatch_latency_seconds",
    "Upstream provider latency in seconds",
    ["provider", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Upstream latency histogram.

Labels:
- provider: Provider id
- success: true (normalized response), false (normalized error)

Alert thresholds:
- WARN: p95 > 10s
- CRITICAL: p95 > 30s
"""

dispatch_tokens_total = Counter(
    "dispatch_tokens_total",
    "Total tokens consumed by provider and type",
    ["provider", "token_type"],
)
"""
Token consumption counter.

Labels:
- provider: Provider id
- token_type: prompt (input tokens), completion (output tokens)

Used for cost estimation and capacity planning.
"""

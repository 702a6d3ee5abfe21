# Copyright (c)
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Every accessor returns a collector bound to the **current**
``prometheus_client.REGISTRY``:

- Safe under hot reload and tests that swap the default registry.
- No duplicate-registration errors.
- Cache automatically resets when the active registry changes.

Histograms use explicit buckets so ``_bucket/_count/_sum`` series appear after
the first ``observe(...)`` call.

Example:
    get_cart_transfers_total().labels(outcome="success").inc()
    get_upstream_request_duration_seconds().labels(
        service="product", operation="get_product"
    ).observe(0.012)
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
)

_registry_id: int | None = None
_collectors: dict[str, Counter | Histogram] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset the collector cache if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _collectors.clear()
            _registry_id = rid


def _lookup_existing[C: (Counter, Histogram)](name: str, kind: type[C]) -> C | None:
    """Return a collector already registered under ``name`` on the active registry."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


def _get_or_create_counter(name: str, help_text: str, labelnames: tuple[str, ...]) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Args:
        name: Metric name (snake_case, without ``_total``).
        help_text: Human-readable description.
        labelnames: Label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _collectors.get(name)
        if isinstance(cached, Counter):
            return cached
        existing = _lookup_existing(name, Counter)
        if existing is not None:
            _collectors[name] = existing
            return existing
        try:
            c = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError:
            again = _lookup_existing(name, Counter)
            if again is None:
                _log.exception("Failed to register Prometheus counter %s", name)
                raise
            c = again
        _collectors[name] = c
        return c


def _get_or_create_hist(
    name: str,
    help_text: str,
    labelnames: tuple[str, ...],
    *,
    buckets: tuple[float, ...] = _BUCKETS,
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        labelnames: Label names tuple.
        buckets: Histogram buckets in seconds.

    Returns:
        Histogram: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _collectors.get(name)
        if isinstance(cached, Histogram):
            return cached
        existing = _lookup_existing(name, Histogram)
        if existing is not None:
            _collectors[name] = existing
            return existing
        try:
            h = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        except ValueError:
            again = _lookup_existing(name, Histogram)
            if again is None:
                _log.exception("Failed to register Prometheus histogram %s", name)
                raise
            h = again
        _collectors[name] = h
        return h


# ---------------------------------------------------------------------------
# Cache metrics


def get_cache_operations_total() -> Counter:
    """Return counter for cache operations.

    Labels:
        operation: ``get_json|set_json|delete|clear``.
        namespace: Key namespace (``wishlist``, ``product``) or backend prefix.
        hit: ``true|false`` for reads, ``n/a`` otherwise.
    """
    return _get_or_create_counter(
        "wishlist_cache_operations_total",
        "Cache operations by namespace and hit/miss",
        ("operation", "namespace", "hit"),
    )


def get_cache_operation_duration_seconds() -> Histogram:
    """Return histogram for cache operation latency (seconds)."""
    return _get_or_create_hist(
        "wishlist_cache_operation_duration_seconds",
        "Latency (seconds) of cache operations",
        ("operation", "namespace", "hit"),
    )


# ---------------------------------------------------------------------------
# Transfer / upstream metrics


def get_cart_transfers_total() -> Counter:
    """Return counter for wishlist-to-cart transfers.

    Labels:
        outcome: ``success|rejected|transport_error|removal_failed``.
    """
    return _get_or_create_counter(
        "wishlist_cart_transfers_total",
        "Wishlist-to-cart transfers by outcome",
        ("outcome",),
    )


def get_upstream_request_duration_seconds() -> Histogram:
    """Return histogram for upstream call latency.

    Labels:
        service: ``product|cart``.
        operation: Gateway method name.
        outcome: ``success|error``.
    """
    return _get_or_create_hist(
        "wishlist_upstream_request_duration_seconds",
        "Latency (seconds) of calls to upstream services",
        ("service", "operation", "outcome"),
    )


def observe_upstream_request(*, service: str, operation: str, outcome: str, seconds: float) -> None:
    """Record one upstream call; never raises."""
    with suppress(Exception):
        get_upstream_request_duration_seconds().labels(
            service=service, operation=operation, outcome=outcome
        ).observe(seconds)


def inc_cart_transfer(outcome: str) -> None:
    """Count one transfer outcome; never raises."""
    with suppress(Exception):
        get_cart_transfers_total().labels(outcome=outcome).inc()


# ---------------------------------------------------------------------------
# HTTP server metrics


def get_http_server_request_duration_seconds() -> Histogram:
    """Return histogram for inbound HTTP request latency."""
    return _get_or_create_hist(
        "http_server_request_duration_seconds",
        "Latency (seconds) of inbound HTTP requests",
        ("method", "route", "status"),
    )

"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge


outfit_generation_total = Counter(
    "outfit_generation_total",
    "Total number of outfit generation requests.",
    ["occasion"],
)

tryon_requests_total = Counter(
    "tryon_requests_total",
    "Virtual try-on requests by outcome.",
    ["status"],
)

orders_placed_total = Counter(
    "orders_placed_total",
    "Orders successfully handed to the catalog backend.",
)

active_carts = Gauge(
    "active_carts",
    "Number of shopping carts held in memory.",
)

style_analysis_total = Counter(
    "style_analysis_total",
    "Home-page photo style analyses by outcome.",
    ["status"],
)

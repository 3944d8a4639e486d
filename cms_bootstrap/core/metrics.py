"""Prometheus metric definitions for the bootstrap routine."""

from __future__ import annotations

from prometheus_client import Counter, Info

# ── Application info ────────────────────────────────────────────────
app_info = Info("cms_bootstrap", "CMS bootstrap application metadata")

# ── Bootstrap outcome ───────────────────────────────────────────────
bootstrap_runs_total = Counter(
    "bootstrap_runs_total",
    "Startup bootstrap runs by final state",
    ["state"],
)

# ── Seeding ─────────────────────────────────────────────────────────
seed_entries_total = Counter(
    "seed_entries_total",
    "Seed entries processed",
    ["model", "status"],
)

seed_uploads_total = Counter(
    "seed_uploads_total",
    "Seed files sent to the upload service",
    ["status"],
)

seed_permissions_total = Counter(
    "seed_permissions_total",
    "Public permissions granted during seeding",
)

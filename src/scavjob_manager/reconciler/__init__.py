"""Reconciliation engine for ScavengerJob resources.

Desired state comes from the job data directory: one subdirectory per job,
with a ``finished`` marker file once the job is done. Actual state lives in
the cluster as ``core.cerit.cz/v1`` ScavengerJob objects. The engine creates
missing jobs, deletes finished ones and removes orphans whose directory went
away. One full pass against the live cluster runs at startup; after that the
poll loop trusts an in-memory set of job names it started itself, so a
steady job costs no API calls per tick.
"""

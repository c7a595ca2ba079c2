"""tidesync — Tidepool to Nightscout sync.

Reads pump settings, boluses, food and physical activity from Tidepool over a
time window and writes the matching profile and treatments to Nightscout.

Subpackages:
    models/  — Pydantic wire models for both services
    clients/ — SourceClient / TargetClient contracts and their httpx adapters
    sync/    — Profile and treatment builders, dedup, and the Syncer
    routers/ — FastAPI endpoints (health, sync triggers)

Entry points:
    main   — FastAPI app (``uvicorn tidesync.main:app``)
    runner — one-shot command line sync (``python -m tidesync``)
"""

__version__ = "0.1.0"

"""
StitchSocial Progression — FastAPI Backend
============================================

REST API over the opportunity matcher and the global XP aggregator.

Endpoints:
    POST /match/score                      — Score one campaign for a creator
    POST /match/rank                       — Rank campaigns for a creator
    POST /global-xp/{creator_id}/recalculate — Recompute global XP + milestones
    GET  /global-xp/{creator_id}           — Stored global XP state
    GET  /global-xp/{creator_id}/summary   — Progress toward next rewards
    GET  /progression/level/{xp}           — Level on the shared curve
    GET  /progression/badges               — Community badge check

Run:
    uvicorn backend.main:app --reload --port 8000
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import APP_NAME, APP_VERSION, CORS_ORIGINS, LOG_LEVEL
from backend.routers import global_xp, matching, progression

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("backend")

# ─────────────────────────────────────────────────────────────────────────────
# FastAPI App
# ─────────────────────────────────────────────────────────────────────────────
app = FastAPI(
    title=APP_NAME,
    description="Creator/campaign matching and global XP milestone ledger for StitchSocial",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(matching.router)
app.include_router(global_xp.router)
app.include_router(progression.router)


@app.get("/")
async def root():
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
    }

"""TalentScope FastAPI application assembly.

Wires the benchmark router and CORS middleware.
Run: uvicorn talentscope.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from talentscope.benchmarks.router import benchmarks_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="TalentScope", version="0.1.0")

# CORS for the reporting frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(benchmarks_router)


@app.get("/api/health")
def health():
    """Liveness probe."""
    return {"ok": True}

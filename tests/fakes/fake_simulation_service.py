"""Fake simulation service for testing.

This module provides an in-memory FastAPI implementation of the simulation
service REST API. Tests mount it into ``RemoteServiceClient`` through
``httpx.ASGITransport``, so the real HTTP client code runs end to end
without a network or a real simulation engine.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

BASE_URL = "http://fake-sim"


def default_snapshot() -> Dict[str, Any]:
    return {
        "birds": [
            {"id": 1, "position": [10.0, 10.0], "state": "resting"},
            {"id": 2, "position": [500.0, 250.0], "state": "migrating"},
        ],
        "predators": [{"id": 1, "position": [700.0, 700.0]}],
        "obstacles": [{"id": 1, "position": [300.0, 300.0], "radius": 10.0}],
        "resources": [
            {"id": 1, "position": [100.0, 900.0], "type": "food"},
            {"id": 2, "position": [900.0, 100.0], "type": "rest"},
        ],
        "temperatureZones": [{"position": [250.0, 750.0], "temperature": 12.5}],
        "time": 0,
        "isRunning": False,
        "worldSize": 1000,
        "collisionCount": 0,
    }


class FakeSimulationService:
    """Deterministic stand-in for the simulation service.

    Attributes:
        snapshot: Snapshot served by ``GET /simulation``
        config: Run configuration
        time_step: Time step scalar
        environment: Global environmental factors
        zones: Zone overrides
        saved: Last saved run, if any
        requests: (method, path) of every request received, in order
        failures: path -> status code to answer with instead of serving
        raw_bodies: path -> raw body text served verbatim (status 200)
        omit_fields: snapshot keys left out of ``GET /simulation`` responses
    """

    def __init__(self) -> None:
        self.snapshot: Dict[str, Any] = default_snapshot()
        self.config: Dict[str, Any] = {
            "simulationSpeed": 100,
            "worldSize": 1000,
            "initialBirds": 50,
            "obstacleCount": 5,
            "resourceCount": 5,
        }
        self.time_step = 1
        self.environment: Dict[str, Any] = {
            "temperature": 20.0,
            "foodAvailability": 1.0,
            "predatorPresence": 0.1,
        }
        self.zones: List[Dict[str, Any]] = [
            {"id": 1, "position": [250.0, 250.0], "temperature": 15.0,
             "foodAvailability": 0.8, "predatorPresence": 0.1},
            {"id": 2, "position": [750.0, 750.0], "temperature": 25.0,
             "foodAvailability": 1.2, "predatorPresence": 0.3},
        ]
        self.saved: Optional[Dict[str, Any]] = None
        self.requests: List[Tuple[str, str]] = []
        self.bodies: Dict[str, Any] = {}
        self.failures: Dict[str, int] = {}
        self.raw_bodies: Dict[str, str] = {}
        self.omit_fields: List[str] = []
        self.app = self._build_app()

    def count(self, method: str, path: str) -> int:
        return sum(1 for request in self.requests if request == (method, path))

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.middleware("http")
        async def record_and_inject(request: Request, call_next):
            path = request.url.path
            self.requests.append((request.method, path))
            if path in self.failures:
                return JSONResponse({"error": "injected failure"}, status_code=self.failures[path])
            if path in self.raw_bodies:
                return Response(self.raw_bodies[path], media_type="application/json")
            return await call_next(request)

        @app.get("/simulation")
        async def get_simulation():
            if self.snapshot["isRunning"]:
                self.snapshot["time"] += self.time_step
            body = copy.deepcopy(self.snapshot)
            for key in self.omit_fields:
                body.pop(key, None)
            return body

        @app.post("/simulation/start")
        async def start_simulation():
            self.snapshot["isRunning"] = True
            return {"message": "Simulation started"}

        @app.post("/simulation/stop")
        async def stop_simulation():
            self.snapshot["isRunning"] = False
            return {"message": "Simulation stopped"}

        @app.get("/simulation/config")
        async def get_config():
            return self.config

        @app.post("/simulation/config")
        async def set_config(request: Request):
            self.config = await request.json()
            self.bodies["/simulation/config"] = self.config
            return {"message": "Simulation config updated"}

        @app.get("/simulation/time-step")
        async def get_time_step():
            return {"timeStep": self.time_step}

        @app.post("/simulation/time-step")
        async def set_time_step(request: Request):
            body = await request.json()
            self.bodies["/simulation/time-step"] = body
            self.time_step = body["timeStep"]
            return {"message": "Time step updated"}

        @app.post("/simulation/save")
        async def save_simulation():
            self.saved = {
                "state": copy.deepcopy(self.snapshot),
                "config": copy.deepcopy(self.config),
                "timeStep": self.time_step,
            }
            return {"message": "Simulation state saved"}

        @app.get("/simulation/load")
        async def load_simulation():
            if self.saved is None:
                return JSONResponse({"error": "no saved state found"}, status_code=500)
            self.snapshot = copy.deepcopy(self.saved["state"])
            self.snapshot["isRunning"] = False
            self.config = copy.deepcopy(self.saved["config"])
            self.time_step = self.saved["timeStep"]
            return self.saved

        @app.get("/environment")
        async def get_environment():
            return self.environment

        @app.post("/environment")
        async def set_environment(request: Request):
            self.environment = await request.json()
            self.bodies["/environment"] = self.environment
            return {"message": "Environmental factors updated"}

        @app.get("/zones")
        async def get_zones():
            return self.zones

        @app.post("/zones")
        async def set_zones(request: Request):
            self.zones = await request.json()
            self.bodies["/zones"] = self.zones
            return {"message": "Zones updated"}

        return app

"""Environmental factors and per-zone overrides, edited locally and pushed in a batch."""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from core.exceptions import RemoteServiceError
from core.models import EnvironmentFactors, Zone, coerce_number, resolve_field_name
from viewer.reconciled import ReconciledValue
from viewer.remote_client import RemoteServiceClient

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[EnvironmentFactors], None]


class EnvironmentReconciler:
    """Owns global factors, the zone list and the zone selection cursor.

    Edits are local only until ``submit()``. ``selected_zone_id`` is a
    client-side cursor and always names an existing zone or is None.
    """

    def __init__(self, client: RemoteServiceClient):
        self._client = client
        self.factors: ReconciledValue[EnvironmentFactors] = ReconciledValue(EnvironmentFactors())
        self.zones: ReconciledValue[List[Zone]] = ReconciledValue([])
        self.selected_zone_id: Optional[int] = None

    @property
    def zone_ids(self) -> List[int]:
        return [zone.id for zone in self.zones.local]

    @property
    def selected_zone(self) -> Optional[Zone]:
        return self._find_zone(self.selected_zone_id)

    def _find_zone(self, zone_id: Optional[int]) -> Optional[Zone]:
        if zone_id is None:
            return None
        for zone in self.zones.local:
            if zone.id == zone_id:
                return zone
        return None

    async def load(self) -> bool:
        """Fetch factors and zones concurrently.

        Each request fails independently; the other one still applies.

        Returns:
            True only if both fetches succeeded
        """
        factors, zones = await asyncio.gather(
            self._client.fetch_environment(),
            self._client.fetch_zones(),
            return_exceptions=True,
        )

        ok = True
        if isinstance(factors, RemoteServiceError):
            logger.error("Failed to fetch environmental factors: %s", factors)
            self.factors.failed(factors)
            ok = False
        elif isinstance(factors, BaseException):
            raise factors
        else:
            self.factors.loaded(factors)

        if isinstance(zones, RemoteServiceError):
            logger.error("Failed to fetch zones: %s", zones)
            self.zones.failed(zones)
            ok = False
        elif isinstance(zones, BaseException):
            raise zones
        else:
            self.zones.loaded(zones)
            logger.debug("Fetched %d zones", len(zones))

        self._ensure_selection()
        return ok

    def _ensure_selection(self) -> None:
        if self._find_zone(self.selected_zone_id) is not None:
            return
        ids = self.zone_ids
        self.selected_zone_id = ids[0] if ids else None

    def edit_factor(self, name: str, value: Any) -> bool:
        """Change one global factor locally; rejected values are never stored."""
        attr = resolve_field_name(EnvironmentFactors, name)
        if attr is None:
            logger.warning("Ignoring edit of unknown environmental factor %r", name)
            return False

        number = coerce_number(value, float)
        if number is None:
            logger.warning("Ignoring non-numeric value %r for %s", value, attr)
            return False

        candidate = self.factors.local.model_dump()
        candidate[attr] = number
        try:
            self.factors.edit(EnvironmentFactors.model_validate(candidate))
        except ValidationError as e:
            logger.warning("Ignoring out-of-range value %r for %s: %s", value, attr, e)
            return False
        return True

    def edit_zone(self, zone_id: int, name: str, value: Any) -> bool:
        """Change one field of the zone with ``zone_id`` locally.

        No-op (returns False) when the zone does not exist or the value is
        rejected.
        """
        zone = self._find_zone(zone_id)
        if zone is None:
            logger.debug("Ignoring edit of unknown zone %s", zone_id)
            return False

        attr = resolve_field_name(Zone, name)
        if attr is None or attr in ("id", "position"):
            logger.warning("Ignoring edit of non-editable zone field %r", name)
            return False

        number = coerce_number(value, float)
        if number is None:
            logger.warning("Ignoring non-numeric value %r for zone %s %s", value, zone_id, attr)
            return False

        candidate = zone.model_dump()
        candidate[attr] = number
        try:
            updated = Zone.model_validate(candidate)
        except ValidationError as e:
            logger.warning("Ignoring out-of-range value %r for zone %s %s: %s", value, zone_id, attr, e)
            return False

        self.zones.edit([updated if z.id == zone_id else z for z in self.zones.local])
        return True

    def select_zone(self, zone_id: Optional[int]) -> bool:
        """Move the selection cursor; unknown ids leave it where it was."""
        if self._find_zone(zone_id) is None:
            logger.debug("Ignoring selection of unknown zone %s", zone_id)
            return False
        self.selected_zone_id = zone_id
        return True

    def select_next_zone(self, step: int = 1) -> Optional[int]:
        """Cycle the selection through the zone list."""
        ids = self.zone_ids
        if not ids:
            self.selected_zone_id = None
            return None
        if self.selected_zone_id in ids:
            index = (ids.index(self.selected_zone_id) + step) % len(ids)
        else:
            index = 0
        self.selected_zone_id = ids[index]
        return self.selected_zone_id

    async def submit(self, on_submitted: Optional[SubmitCallback] = None) -> bool:
        """Push the full factors object and the full zone list.

        ``on_submitted`` receives the submitted factors once both pushes
        succeed. Nothing is refetched afterwards.
        """
        factors = self.factors.local
        zones = list(self.zones.local)

        try:
            await self._client.update_environment(factors)
        except RemoteServiceError as e:
            logger.error("Failed to update environmental factors: %s", e)
            self.factors.failed(e)
            return False
        self.factors.confirm(factors)

        try:
            await self._client.update_zones(zones)
        except RemoteServiceError as e:
            logger.error("Failed to update zones: %s", e)
            self.zones.failed(e)
            return False
        self.zones.confirm(zones)

        logger.info("Submitted environment (%d zones)", len(zones))
        if on_submitted is not None:
            on_submitted(factors)
        return True

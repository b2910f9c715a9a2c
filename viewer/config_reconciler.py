"""Run configuration: fetched once, edited optimistically, pushed whole."""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from core.exceptions import RemoteServiceError
from core.models import RunConfig, TimeStep, coerce_number, resolve_field_name
from viewer.reconciled import ReconciledValue
from viewer.remote_client import RemoteServiceClient

logger = logging.getLogger(__name__)


class ConfigReconciler:
    """Owns the editable RunConfig and the separate time-step scalar.

    Edits land in the local slot immediately and are then pushed; a failed
    push leaves the local value in place and records the error on the slot.
    The remote copy is only refreshed by an explicit ``load()``.
    """

    def __init__(self, client: RemoteServiceClient):
        self._client = client
        self.config: ReconciledValue[RunConfig] = ReconciledValue(RunConfig())
        self.time_step: ReconciledValue[int] = ReconciledValue(TimeStep().time_step)

    @property
    def current(self) -> RunConfig:
        """The operator-visible config."""
        return self.config.local

    async def load(self) -> bool:
        """Fetch the run configuration from the service."""
        try:
            config = await self._client.fetch_config()
        except RemoteServiceError as e:
            logger.error("Failed to load config: %s", e)
            self.config.failed(e)
            return False

        self.config.loaded(config)
        logger.debug("Loaded run config %s", config.to_wire())
        return True

    async def load_time_step(self) -> bool:
        """Fetch the time step from its own endpoint."""
        try:
            time_step = await self._client.fetch_time_step()
        except RemoteServiceError as e:
            logger.error("Failed to load time step: %s", e)
            self.time_step.failed(e)
            return False

        self.time_step.loaded(time_step)
        return True

    async def set_field(self, name: str, value: Any) -> bool:
        """Edit one config field and push the whole updated config.

        Args:
            name: Wire (``simulationSpeed``) or attribute (``simulation_speed``) name
            value: New value; coerced to int

        Returns:
            False if the edit was rejected or the push failed
        """
        updated = self._validated_edit(name, value)
        if updated is None:
            return False

        # Local first: readers see the new value whether or not the push succeeds
        self.config.edit(updated)

        try:
            await self._client.update_config(updated)
        except RemoteServiceError as e:
            logger.error("Failed to update config: %s", e)
            self.config.failed(e)
            return False

        self.config.confirm(updated)
        return True

    def _validated_edit(self, name: str, value: Any) -> Optional[RunConfig]:
        attr = resolve_field_name(RunConfig, name)
        if attr is None:
            logger.warning("Ignoring edit of unknown config field %r", name)
            return None

        number = coerce_number(value, int)
        if number is None:
            logger.warning("Ignoring non-numeric value %r for %s", value, attr)
            return None

        candidate = self.config.local.model_dump()
        candidate[attr] = number
        try:
            return RunConfig.model_validate(candidate)
        except ValidationError as e:
            logger.warning("Ignoring out-of-range value %r for %s: %s", value, attr, e)
            return None

    async def set_time_step(self, value: Any) -> bool:
        """Edit and push the time step.

        Returns:
            False if the value was rejected or the push failed
        """
        time_step = coerce_number(value, int)
        if time_step is None or time_step <= 0:
            logger.warning("Ignoring invalid time step %r", value)
            return False

        self.time_step.edit(time_step)

        try:
            await self._client.update_time_step(time_step)
        except RemoteServiceError as e:
            logger.error("Failed to set time step: %s", e)
            self.time_step.failed(e)
            return False

        self.time_step.confirm(time_step)
        return True

    def adopt(self, config: Optional[RunConfig], time_step: Optional[int]) -> None:
        """Take over values restored by the service (e.g. a loaded run)."""
        if config is not None:
            self.config.loaded(config)
        if time_step is not None:
            self.time_step.loaded(time_step)

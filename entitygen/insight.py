"""
entitygen usage statistics

Opt-in only. When enabled, each sub-generator run sends one anonymous event:
the generator kind and name, the tool version and the platform. Nothing about
the model, file paths or project names leaves the machine.
"""

import os
import json
import uuid
import platform
from pathlib import Path
from typing import Optional, Dict, Any

import httpx

from entitygen import __version__
from entitygen.logging_config import logger


class Statistics:
    """
    Sends sub-generator events to the statistics endpoint.

    Usage:
        stats = Statistics(enabled=config.insight_enabled, url=config.insight_url)
        stats.send_sub_gen_event("generator", "import-jdl")
    """

    def __init__(
        self,
        enabled: bool = False,
        url: str = "",
        config_dir: Optional[Path] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 5.0,
    ):
        self.enabled = enabled
        self.url = url.rstrip("/")
        self.config_dir = config_dir or Path.home() / ".entitygen"
        self.id_file = self.config_dir / "insight.json"
        self.timeout = timeout
        self._client = client
        self._anonymous_id: Optional[str] = None
        self.sent: int = 0

    def is_enabled(self) -> bool:
        env_disabled = os.environ.get("ENTITYGEN_INSIGHT_DISABLED", "").lower() in ("1", "true", "yes")
        return self.enabled and bool(self.url) and not env_disabled

    def anonymous_id(self) -> str:
        """Installation ID, created on first use"""
        if self._anonymous_id:
            return self._anonymous_id

        if self.id_file.exists():
            try:
                data = json.loads(self.id_file.read_text(encoding="utf-8"))
                if isinstance(data, dict) and data.get("anonymous_id"):
                    self._anonymous_id = data["anonymous_id"]
                    return self._anonymous_id
            except (json.JSONDecodeError, OSError):
                logger.debug(f"Regenerating unreadable {self.id_file}")

        self._anonymous_id = str(uuid.uuid4())
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.id_file.write_text(json.dumps({"anonymous_id": self._anonymous_id}, indent=2), encoding="utf-8")
        except OSError as e:
            logger.debug(f"Could not store installation ID in {self.id_file}: {e}")
        return self._anonymous_id

    def payload(self, source: str, name: str) -> Dict[str, Any]:
        return {
            "source": source,
            "type": name,
            "user-id": self.anonymous_id(),
            "version": __version__,
            "platform": platform.system().lower(),
        }

    def send_sub_gen_event(self, source: str, name: str) -> bool:
        """Post one event; network problems never interrupt a run"""
        if not self.is_enabled():
            return False

        url = f"{self.url}/event/{source}/{name}"
        try:
            if self._client is not None:
                response = self._client.post(url, json=self.payload(source, name), timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(url, json=self.payload(source, name))
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"Statistics event not sent: {e}")
            return False

        self.sent += 1
        return True

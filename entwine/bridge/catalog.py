"""Remote mod catalog client.

Only the fields Entwine needs are modelled (see :class:`ModDescriptor`);
unknown keys in the catalog payload are ignored.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from entwine.bridge.fetch import Fetcher
from entwine.core.errors import NetworkError, NotFoundError
from entwine.models.mods import ModDescriptor

logger = logging.getLogger(__name__)


class ModCatalog:
    """Lists and downloads mods from the catalog service.

    Parameters
    ----------
    fetcher:
        The fetch collaborator.
    api_url:
        URL returning a JSON array of mod objects.
    base_url:
        Prefix for the relative ``filePath`` and ``iconPath`` values.
    """

    def __init__(self, fetcher: Fetcher, api_url: str, base_url: str) -> None:
        self._fetcher = fetcher
        self._api_url = api_url
        self._base_url = base_url.rstrip("/")

    def resolve_url(self, path: str) -> str:
        """Turn a catalog-relative path into an absolute URL."""
        if not path or path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def fetch_mods(self) -> list[ModDescriptor]:
        """Return every mod the catalog advertises, icon paths resolved.

        Entries that fail validation are logged and skipped.

        Raises
        ------
        NetworkError
            If the catalog cannot be downloaded or is not a JSON array.
        """
        text = self._fetcher.fetch_text(self._api_url)
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise NetworkError(f"Failed to parse mods: {exc}") from exc
        if not isinstance(payload, list):
            raise NetworkError("Failed to parse mods: expected a JSON array")

        mods: list[ModDescriptor] = []
        for raw in payload:
            try:
                descriptor = ModDescriptor.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Skipping malformed catalog entry: %s", exc)
                continue
            mods.append(
                descriptor.model_copy(update={"icon_path": self.resolve_url(descriptor.icon_path)})
            )
        logger.info("Catalog lists %d mod(s).", len(mods))
        return mods

    def find(self, mod_id: str) -> ModDescriptor:
        """Return the catalog entry with id *mod_id*.

        Raises
        ------
        NotFoundError
            If the catalog has no such mod.
        """
        for descriptor in self.fetch_mods():
            if descriptor.id == mod_id:
                return descriptor
        raise NotFoundError(f"Mod {mod_id} is not in the catalog")

    def download(self, descriptor: ModDescriptor) -> bytes:
        """Download the payload for *descriptor*."""
        return self._fetcher.fetch(self.resolve_url(descriptor.file_path))

"""
LinkService module for Shortlink.

Responsibilities:
    - Validate URLs
    - Issue random short codes or accept caller-chosen custom codes
    - Return the existing mapping when a URL is shortened twice
    - Resolve codes to URLs and count visits
    - Interface with an injected store backend

Design notes:
    - The store's UNIQUE(short_code) constraint is the source of truth. The
      pre-insert lookups are early exits; a ConstraintError on insert is the
      check-then-insert race and maps to the same user-facing result.
    - Generated codes that collide on insert are regenerated, at most
      `max_code_retries` more times.
    - Results are plain dicts shaped like the JSON API responses; storage
      failures never leak their text into them.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from ..errors import ConstraintError, StorageError
from ..storage.base import BaseStore
from .codes import DEFAULT_CODE_LENGTH, generate_short_code, is_valid_url

log = logging.getLogger("shortlink.service")

CodeGenerator = Callable[[int], str]  # (length) -> code

INVALID_URL = "Invalid URL"
CODE_IN_USE = "Custom code already in use"
CREATE_FAILED = "Error creating link"
LINK_NOT_FOUND = "Link not found"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _failure(error: str) -> Dict[str, Any]:
    return {"success": False, "error": error}


class LinkService:
    """
    Coordinates creation and resolution rules for short links.
    """

    def __init__(
        self,
        store: BaseStore,
        base_url: str,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_code_retries: int = 3,
        code_generator: Optional[CodeGenerator] = None,
    ):
        """
        Args:
            store (BaseStore): Backend store instance.
            base_url (str): Public base URL; `shortUrl` is `base_url/code`.
            code_length (int): Length of generated codes.
            max_code_retries (int): Regenerations allowed after a generated
                code collides on insert.
            code_generator (Optional[CodeGenerator]): Custom code generation (optional).
        """
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.code_length = code_length
        self.max_code_retries = max_code_retries
        self.code_generator = code_generator or generate_short_code

    def short_url(self, short_code: str) -> str:
        return f"{self.base_url}/{short_code}"

    def _created(self, short_code: str, original_url: str) -> Dict[str, Any]:
        return {
            "success": True,
            "shortCode": short_code,
            "originalUrl": original_url,
            "shortUrl": self.short_url(short_code),
        }

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_link(self, original_url: str, custom_code: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a short link for `original_url`, optionally under `custom_code`.

        Rules:
            - Invalid URL -> "Invalid URL", nothing stored.
            - URL already shortened -> its existing code (even if a
              different custom code was requested).
            - Custom code taken -> "Custom code already in use".
            - Storage failure -> "Error creating link".

        Returns:
            dict: `{"success": True, "shortCode", "originalUrl", "shortUrl"}`
                  or `{"success": False, "error"}`.
        """
        if not is_valid_url(original_url):
            return _failure(INVALID_URL)

        try:
            existing = self.store.find_by_url(original_url)
            if existing:
                log.debug("URL already shortened as %s", existing.short_code)
                return self._created(existing.short_code, existing.original_url)

            if custom_code:
                return self._insert_custom(original_url, custom_code)
            return self._insert_generated(original_url)
        except StorageError:
            log.exception("Error creating link for %s", original_url)
            return _failure(CREATE_FAILED)

    def resolve(self, short_code: str) -> Dict[str, Any]:
        """
        Look up the destination of `short_code` and count the visit.

        A failed visit increment is logged and does not block the redirect.

        Returns:
            dict: `{"success": True, "url"}` or `{"success": False, "error": "Link not found"}`.
        """
        link = self.store.find_by_code(short_code)
        if link is None:
            log.debug("Short code not found: %s", short_code)
            return _failure(LINK_NOT_FOUND)

        try:
            self.store.increment_visits(short_code)
        except StorageError:
            log.warning("Could not count visit for %s", short_code, exc_info=True)

        return {"success": True, "url": link.original_url}

    # ---------------------------------------------------------------------
    # Insert paths
    # ---------------------------------------------------------------------
    def _insert_custom(self, original_url: str, custom_code: str) -> Dict[str, Any]:
        if self.store.find_by_code(custom_code):
            return _failure(CODE_IN_USE)
        try:
            self.store.insert(original_url, custom_code, _now_ms())
        except ConstraintError:
            # Lost the race against a concurrent insert of the same code
            return _failure(CODE_IN_USE)
        log.info("Created link %s -> %s", custom_code, original_url)
        return self._created(custom_code, original_url)

    def _insert_generated(self, original_url: str) -> Dict[str, Any]:
        for attempt in range(self.max_code_retries + 1):
            code = self.code_generator(self.code_length)
            try:
                self.store.insert(original_url, code, _now_ms())
            except ConstraintError:
                log.warning("Generated code %s collided (attempt %d)", code, attempt + 1)
                continue
            log.info("Created link %s -> %s", code, original_url)
            return self._created(code, original_url)

        log.error("No free short code after %d attempts", self.max_code_retries + 1)
        return _failure(CREATE_FAILED)

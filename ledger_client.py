"""Ledger API client.

A thin wrapper around the Ledger REST API for scripts and back-office
tooling that should not talk to the database directly.  The client uses
the ``requests`` library internally and exposes one method per API
operation:

* persons: :meth:`search_persons`, :meth:`list_persons`,
  :meth:`get_person`, :meth:`create_person`, :meth:`update_person`,
  :meth:`delete_person`
* accounts: :meth:`get_account`, :meth:`get_account_by_number`,
  :meth:`list_accounts_for_person`, :meth:`create_account`,
  :meth:`update_account`, :meth:`close_account`, :meth:`reopen_account`
* transactions: :meth:`get_transaction`,
  :meth:`list_transactions_for_account`, :meth:`create_transaction`,
  :meth:`update_transaction`

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is ``None`` (or an empty list for list
operations) and ``error`` is a dictionary with the keys ``status_code``
and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class LedgerAPI:
    """Client for interacting with the Ledger API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api",
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_prefix: Prefix the API is mounted under on the server.
            timeout: Timeout in seconds for each request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/") + api_prefix.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API root (e.g. ``/persons``).
            params: Query parameters; ``None`` values are dropped.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.  ``data`` is the parsed JSON body
            (``None`` for empty bodies) and ``error`` describes a failure.
        """
        url = f"{self.base_url}{path}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None and exc.response.content:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("message") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, **kwargs: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", path, **kwargs)
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Person operations
    # ------------------------------------------------------------------
    def search_persons(
        self,
        *,
        id_number: Optional[str] = None,
        surname: Optional[str] = None,
        account_number: Optional[str] = None,
        page_number: int = 1,
        page_size: int = 10,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Search persons.  Returns the page object (``items``, ``totalPages``...)."""
        params = {
            "idNumber": id_number,
            "surname": surname,
            "accountNumber": account_number,
            "pageNumber": page_number,
            "pageSize": page_size,
        }
        return self._request("GET", "/persons", params=params)

    def list_persons(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/persons/all")

    def get_person(self, code: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/persons/{code}")

    def create_person(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/persons", json_body=payload)

    def update_person(self, code: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        body = {**payload, "code": code}
        return self._request("PUT", f"/persons/{code}", json_body=body)

    def delete_person(self, code: int) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/persons/{code}")
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Account operations
    # ------------------------------------------------------------------
    def get_account(self, code: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/accounts/{code}")

    def get_account_by_number(self, account_number: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/accounts/by-number/{quote(account_number, safe='')}")

    def list_accounts_for_person(self, person_code: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/accounts/by-person/{person_code}")

    def create_account(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/accounts", json_body=payload)

    def update_account(self, code: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        body = {**payload, "code": code}
        return self._request("PUT", f"/accounts/{code}", json_body=body)

    def close_account(self, code: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", f"/accounts/{code}/close")

    def reopen_account(self, code: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", f"/accounts/{code}/reopen")

    # ------------------------------------------------------------------
    # Transaction operations
    # ------------------------------------------------------------------
    def get_transaction(self, code: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/transactions/{code}")

    def list_transactions_for_account(self, account_code: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/transactions/by-account/{account_code}")

    def create_transaction(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/transactions", json_body=payload)

    def update_transaction(self, code: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        body = {**payload, "code": code}
        return self._request("PUT", f"/transactions/{code}", json_body=body)

import base64
import json
from typing import Dict, List
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from zee_ordering.config import Settings

SHEETS_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"
SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"


class SheetsConfigError(Exception):
    """Service-account credentials are missing or malformed."""
    pass


class SheetsError(Exception):
    """The Sheets API call failed."""
    pass


def load_service_account_info(settings: Settings) -> Dict:
    """
    Read the service-account JSON from GOOGLE_SERVICE_ACCOUNT_JSON, or from
    its base64 form in GOOGLE_SERVICE_ACCOUNT_JSON_BASE64.
    """
    raw = settings.GOOGLE_SERVICE_ACCOUNT_JSON
    if not raw and settings.GOOGLE_SERVICE_ACCOUNT_JSON_BASE64:
        try:
            raw = base64.b64decode(settings.GOOGLE_SERVICE_ACCOUNT_JSON_BASE64).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            raise SheetsConfigError(f"Invalid base64 service account JSON: {e}")
    if not raw:
        raise SheetsConfigError(
            "Missing GOOGLE_SERVICE_ACCOUNT_JSON or GOOGLE_SERVICE_ACCOUNT_JSON_BASE64 env var."
        )
    try:
        info = json.loads(raw)
    except ValueError as e:
        raise SheetsConfigError(f"Invalid service account JSON: {e}")
    if not isinstance(info, dict) or not info.get("client_email") or not info.get("private_key"):
        raise SheetsConfigError(
            "Invalid service account JSON (missing client_email/private_key)."
        )
    return info


class GoogleSheetsAdapter:
    """
    Read-only client for the Sheets v4 ``values.get`` endpoint.
    get_values returns the rows of a range as lists of strings.
    """

    def __init__(self, settings: Settings, timeout: float = 30.0):
        self.settings = settings
        self.timeout = timeout
        self._session = None

    def _get_session(self) -> AuthorizedSession:
        if self._session is None:
            info = load_service_account_info(self.settings)
            try:
                creds = service_account.Credentials.from_service_account_info(
                    info, scopes=[SHEETS_SCOPE]
                )
            except (ValueError, GoogleAuthError) as e:
                raise SheetsConfigError(f"Could not load service account: {e}")
            self._session = AuthorizedSession(creds)
        return self._session

    def get_values(self, spreadsheet_id: str, cell_range: str) -> List[List[str]]:
        session = self._get_session()
        url = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}/values/{quote(cell_range, safe='')}"
        try:
            resp = session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, GoogleAuthError) as e:
            raise SheetsError(f"Sheets API request failed: {e}")
        except ValueError as e:
            raise SheetsError(f"Sheets API returned malformed JSON: {e}")
        values = body.get("values") if isinstance(body, dict) else None
        if values is None:
            values = []
        if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
            raise SheetsError("Sheets API returned an unexpected values payload")
        return [[("" if cell is None else str(cell)) for cell in row] for row in values]

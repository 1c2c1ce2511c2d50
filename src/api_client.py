"""
HTTP client for the Sportify REST backend.

Carries the bearer token, refreshes it once on a 401, and turns the
backend's JSON DTOs into bracket entities.
"""
import logging
from typing import List, Optional

import requests

from bracket.models import Fixture, Round, RoundFormat, Team

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class AuthenticationError(ApiError):
    pass


def _error_message(response) -> str:
    """Extract a readable error from a failed response."""
    text = response.text or ''
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get('error'):
        return str(data['error'])
    if text:
        return text
    return f'HTTP error! status: {response.status_code}'


def _json_or_none(response):
    content_type = response.headers.get('Content-Type', '')
    if response.status_code == 204 or not response.text or 'application/json' not in content_type:
        return None
    try:
        return response.json()
    except ValueError:
        logger.warning('Failed to parse JSON response, treating as empty')
        return None


class SportifyClient:
    def __init__(self, base_url: str, token_store=None, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token_store = token_store
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _url(self, endpoint: str) -> str:
        return f'{self.base_url}{endpoint}'

    def _headers(self, authenticated: bool) -> dict:
        headers = {'Content-Type': 'application/json'}
        if authenticated and self.token_store is not None:
            token = self.token_store.load().get('token')
            if token:
                headers['Authorization'] = f'Bearer {token}'
        return headers

    def _send(self, method: str, endpoint: str, json=None, authenticated: bool = True):
        logger.debug(f'{method} {endpoint}')
        try:
            return self.session.request(
                method,
                self._url(endpoint),
                json=json,
                headers=self._headers(authenticated),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'Network error on {method} {endpoint}: {e}')
            raise ApiError(503, str(e) or 'Network error occurred') from e

    def request(self, method: str, endpoint: str, json=None, authenticated: bool = True):
        """Send a request and return the decoded JSON body (None when empty)."""
        response = self._send(method, endpoint, json=json, authenticated=authenticated)

        if response.status_code == 401 and authenticated:
            if self.refresh():
                response = self._send(method, endpoint, json=json, authenticated=authenticated)
            if response.status_code == 401:
                if self.token_store is not None:
                    self.token_store.clear()
                raise AuthenticationError(401, 'Authentication failed. Please login again.')

        if not response.ok:
            raise ApiError(response.status_code, _error_message(response))
        return _json_or_none(response)

    def refresh(self) -> bool:
        """Exchange the stored refresh token for a new token pair."""
        if self.token_store is None:
            return False
        refresh_token = self.token_store.load().get('refresh_token')
        if not refresh_token:
            return False
        response = self._send('POST', '/api/auth/refresh',
                              json={'refreshToken': refresh_token}, authenticated=False)
        if not response.ok:
            logger.warning(f'Token refresh failed with status {response.status_code}')
            return False
        data = _json_or_none(response) or {}
        if not data.get('token'):
            return False
        self.token_store.save(data['token'], data.get('refreshToken', refresh_token))
        logger.info('Access token refreshed')
        return True

    def login(self, email: str, password: str) -> dict:
        data = self.request('POST', '/api/auth/login',
                            json={'email': email, 'password': password}, authenticated=False)
        if not data or not data.get('token'):
            raise AuthenticationError(401, 'Login response did not include a token.')
        if self.token_store is not None:
            self.token_store.save(data['token'], data.get('refreshToken'))
        return data

    def get_round_by_value(self, tournament_id: int, round_value: int) -> Optional[Round]:
        try:
            data = self.request('GET', f'/api/tournaments/{tournament_id}/rounds/value/{round_value}')
        except ApiError as e:
            if e.status == 404:
                return None
            raise
        return Round.from_dict(data) if data else None

    def get_existing_fixture(self, tournament_id: int) -> Fixture:
        data = self.request('GET', f'/api/tournaments/{tournament_id}/fixture/existing') or {}
        fixture = Fixture.from_dict(data)
        if fixture.tournament_id is None:
            fixture.tournament_id = tournament_id
        return fixture

    def get_tournament_teams(self, tournament_id: int) -> List[Team]:
        data = self.request('GET', f'/api/teams/tournament/{tournament_id}') or []
        return [Team.from_dict(t) for t in data]

    def get_placeholder_teams(self, tournament_id: int, round_value: int) -> List[Team]:
        data = self.request('GET', f'/api/teams/dummy/tournament/{tournament_id}/round/{round_value}') or []
        return [Team.from_dict({**t, 'dummy': True}) for t in data]

    def create_placeholder_team(self, name: str, tournament_id: int, sport_id: Optional[int] = None,
                                created_by_id: Optional[int] = None) -> Team:
        payload = {
            'teamName': name,
            'sportId': sport_id,
            'tournamentId': tournament_id,
            'createdById': created_by_id,
        }
        data = self.request('POST', '/api/teams/dummy', json=payload)
        if data:
            return Team.from_dict({**data, 'dummy': True})
        return Team(None, name, True)

    def delete_placeholder_teams(self, tournament_id: int, round_value: int):
        self.request('DELETE', f'/api/teams/dummy/tournament/{tournament_id}/round/{round_value}')

    def create_round(self, tournament_id: int, round_value: int, round_name: str,
                     round_format: RoundFormat) -> Round:
        payload = {
            'roundValue': round_value,
            'roundName': round_name,
            'type': None if round_format == RoundFormat.UNSET else round_format.value,
        }
        data = self.request('POST', f'/api/tournaments/{tournament_id}/rounds', json=payload)
        if data:
            return Round.from_dict(data)
        return Round(round_value, round_name, round_format)

    def delete_round(self, tournament_id: int, round_id: int):
        self.request('DELETE', f'/api/tournaments/{tournament_id}/rounds/{round_id}')

    def select_round_type(self, round_id: int, round_format: RoundFormat):
        """Ask the backend to generate the round's matches in the given format."""
        return self.request('POST', f'/api/tournaments/rounds/{round_id}/select-type',
                            json={'type': round_format.value})

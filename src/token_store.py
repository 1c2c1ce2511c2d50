"""
File-backed storage for the backend's access and refresh tokens.
"""
import os
import logging
import yaml
from filelock import FileLock

logger = logging.getLogger(__name__)


class TokenStore:
    def __init__(self, path: str):
        self.path = path
        self._lock = FileLock(f'{path}.lock', timeout=10)

    def load(self) -> dict:
        """Load {'token': ..., 'refresh_token': ...}; missing values are None."""
        tokens = {'token': None, 'refresh_token': None}
        if not os.path.exists(self.path):
            return tokens
        with self._lock:
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f'Failed to parse {self.path}: {e}')
                return tokens
        if not isinstance(data, dict):
            logger.warning(f'Ignoring malformed token file {self.path}')
            return tokens
        tokens['token'] = data.get('token')
        tokens['refresh_token'] = data.get('refresh_token')
        return tokens

    def save(self, token: str, refresh_token: str = None):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self._lock:
            with open(self.path, 'w', encoding='utf-8') as f:
                yaml.dump({'token': token, 'refresh_token': refresh_token}, f, default_flow_style=False)

    def clear(self):
        if not os.path.exists(self.path):
            return
        with self._lock:
            if os.path.exists(self.path):
                os.remove(self.path)

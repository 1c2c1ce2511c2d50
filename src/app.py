"""
Flask web application exposing the bracket engine and fixture workflows.
"""
import os
import logging
from flask import Flask, request, jsonify

from api_client import ApiError, SportifyClient, DEFAULT_TIMEOUT
from bracket.engine import compute_winners, next_round_matches, round_name, total_rounds_for_bracket
from bracket.errors import BracketError, InvalidPayload
from bracket.models import Round, Team, parse_format
from fixture_service import FixtureService
from token_store import TokenStore

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
API_URL = os.environ.get('SPORTIFY_API_URL', 'http://localhost:8090')
API_TIMEOUT = float(os.environ.get('SPORTIFY_API_TIMEOUT', DEFAULT_TIMEOUT))
TOKEN_FILE = os.path.join(DATA_DIR, 'tokens.yaml')

if os.environ.get('SECRET_KEY'):
    app.secret_key = os.environ['SECRET_KEY']

if not app.debug:
    app.logger.setLevel(logging.INFO)

_service = None


def get_service() -> FixtureService:
    """Build the fixture service on first use from the configured backend URL."""
    global _service
    if _service is None:
        client = SportifyClient(API_URL, token_store=TokenStore(TOKEN_FILE), timeout=API_TIMEOUT)
        _service = FixtureService(client)
        app.logger.info(f'Using Sportify backend at {API_URL}')
    return _service


@app.errorhandler(BracketError)
def handle_bracket_error(e):
    app.logger.info(f'{type(e).__name__}: {e.message}')
    return jsonify({'error': e.message, 'code': type(e).__name__}), 400


@app.errorhandler(ApiError)
def handle_api_error(e):
    status = e.status if 400 <= e.status < 500 else 502
    app.logger.warning(f'Backend request failed ({e.status}): {e.message}')
    return jsonify({'error': e.message, 'code': type(e).__name__}), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidPayload('Request body must be a JSON object.')
    return data


def _flag(name: str) -> bool:
    return request.args.get(name, '').lower() in ('1', 'true', 'yes')


@app.route('/api/bracket/round-name')
def api_round_name():
    round_number = request.args.get('round', type=int)
    teams = request.args.get('teams', type=int)
    if round_number is None or teams is None:
        return jsonify({'error': "Query parameters 'round' and 'teams' must be integers"}), 400
    return jsonify({'roundName': round_name(round_number, teams)})


@app.route('/api/bracket/total-rounds')
def api_total_rounds():
    teams = request.args.get('teams', type=int)
    if teams is None:
        return jsonify({'error': "Query parameter 'teams' must be an integer"}), 400
    return jsonify({'totalRounds': total_rounds_for_bracket(teams)})


@app.route('/api/bracket/winners', methods=['POST'])
def api_compute_winners():
    """Winners of a round posted in the backend's round DTO shape."""
    rnd = Round.from_dict(_json_body())
    winners = compute_winners(rnd, ranked=_flag('ranked'))
    return jsonify({'winners': [t.to_dict() for t in winners]})


@app.route('/api/bracket/next-round', methods=['POST'])
def api_next_round():
    data = _json_body()
    advancers = data.get('advancers')
    if not isinstance(advancers, list):
        return jsonify({'error': "'advancers' must be a list of teams"}), 400
    round_value = data.get('roundValue')
    if not isinstance(round_value, int):
        return jsonify({'error': "'roundValue' must be an integer"}), 400

    teams = [Team.from_dict(t) for t in advancers]
    drafts = next_round_matches(teams, parse_format(data.get('type')), round_value)
    return jsonify({'matches': [d.to_dict() for d in drafts]})


@app.route('/api/fixture/<int:tournament_id>')
def api_fixture(tournament_id):
    return jsonify(get_service().describe_fixture(tournament_id))


@app.route('/api/fixture/<int:tournament_id>/rounds/<int:round_value>/winners')
def api_fixture_winners(tournament_id, round_value):
    winners = get_service().round_winners(tournament_id, round_value, ranked=_flag('ranked'))
    return jsonify({'winners': [t.to_dict() for t in winners]})


@app.route('/api/fixture/<int:tournament_id>/rounds/<int:round_value>/preview', methods=['POST'])
def api_preview_round(tournament_id, round_value):
    round_format = parse_format(_json_body().get('type'))
    drafts = get_service().preview_next_round(tournament_id, round_value, round_format)
    return jsonify({'matches': [d.to_dict() for d in drafts]})


@app.route('/api/fixture/<int:tournament_id>/rounds/<int:round_value>/generate', methods=['POST'])
def api_generate_round(tournament_id, round_value):
    data = _json_body()
    round_format = parse_format(data.get('type'))
    rnd, drafts = get_service().generate_next_round(
        tournament_id, round_value, round_format,
        sport_id=data.get('sportId'),
        created_by_id=data.get('createdById'),
    )
    app.logger.info(f'Generated round {rnd.round_value} for tournament {tournament_id} ({round_format.value})')
    return jsonify({'round': rnd.to_dict(), 'matches': [d.to_dict() for d in drafts]}), 201


@app.route('/api/fixture/<int:tournament_id>/rounds/<int:round_value>/regenerate', methods=['POST'])
def api_regenerate_round(tournament_id, round_value):
    round_format = parse_format(_json_body().get('type'))
    rnd = get_service().regenerate_round(tournament_id, round_value, round_format)
    app.logger.info(f'Regenerated round {round_value} for tournament {tournament_id} ({round_format.value})')
    return jsonify({'round': rnd.to_dict()})


if __name__ == '__main__':
    app.run(debug=True)

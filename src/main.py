# Entry point for working out round progression from a round file

import argparse
import sys
import yaml
from bracket.engine import compute_winners, next_round_matches, round_name, distinct_teams
from bracket.errors import BracketError, InsufficientAdvancers
from bracket.models import Round, RoundFormat, parse_format


def load_round(file_path):
    """Load a round in the backend DTO shape from YAML (or JSON)."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        return Round.from_dict(yaml.safe_load(file))


def describe_round(rnd, next_format=None, ranked=False):
    """Return the printable lines for a round's winners and next-round pairings."""
    lines = []
    name = rnd.round_name or round_name(rnd.round_value, len(distinct_teams(rnd)))
    lines.append(f"# {name} ({rnd.format.value})")

    winners = compute_winners(rnd, ranked=ranked)
    lines.append("Winners:")
    for i, team in enumerate(winners, start=1):
        marker = " (pending)" if team.is_placeholder else ""
        lines.append(f"  {i}. {team.name}{marker}")

    next_format = next_format or rnd.format
    lines.append("")
    try:
        drafts = next_round_matches(winners, next_format, rnd.round_value)
    except InsufficientAdvancers as e:
        lines.append(f"No next round: {e.message}")
        return lines
    lines.append(f"# Next round ({next_format.value})")
    for draft in drafts:
        team2 = draft.team2.name if draft.team2 else "BYE"
        lines.append(f"{draft.team1.name} vs {team2}")
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(description='Show round winners and next-round pairings.')
    parser.add_argument('round_file', help='YAML or JSON file holding one round')
    parser.add_argument('--type', choices=[RoundFormat.KNOCKOUT.value, RoundFormat.ROUND_ROBIN.value],
                        help='Format of the next round (defaults to the round\'s own format)')
    parser.add_argument('--ranked', action='store_true',
                        help='Rank a finished round-robin round by its standings')
    args = parser.parse_args(argv)

    try:
        rnd = load_round(args.round_file)
        next_format = parse_format(args.type) if args.type else None
        lines = describe_round(rnd, next_format, args.ranked)
    except (BracketError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""CLI entry point for the team shortlist engine."""

import argparse
import logging
import sys

from shortlist.core.config import Settings
from shortlist.core.dataset import CandidateDataset, DatasetError
from shortlist.core.db import init_db
from shortlist.core.schemas import FilterCriteria
from shortlist.pipeline.orchestrator import build_shortlist, describe_filters, export_results_json
from shortlist.pipeline.score_cache import ScoreCache
from shortlist.pipeline.scorer import score_candidate
from shortlist.team.roster import Roster


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def _add_criteria(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--role", help="Use the keyword lists of a configured role")
    parser.add_argument("--skills", nargs="*", default=[], help="Skill keywords")
    parser.add_argument("--experience", nargs="*", default=[], help="Experience (role title) keywords")
    parser.add_argument("--education", nargs="*", default=[], help="Education keywords")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Team shortlist - score and rank candidates, then assemble a team",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- score subcommand ---
    score_parser = subparsers.add_parser("score", help="Score candidates against role criteria")
    _add_common(score_parser)
    _add_criteria(score_parser)
    score_parser.add_argument("--dataset", help="Override the dataset path from settings")
    score_parser.add_argument(
        "--rank",
        action="store_true",
        help="Sort by score (prestige breaks ties) instead of dataset order",
    )
    score_parser.add_argument("--limit", type=int, default=None, help="Show at most N candidates")
    score_parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )

    # --- team subcommand ---
    team_parser = subparsers.add_parser("team", help="Manage the shortlisted team")
    _add_common(team_parser)
    team_sub = team_parser.add_subparsers(dest="team_command", required=True)

    size_parser = team_sub.add_parser("size", help="Set the number of roles")
    size_parser.add_argument("size", type=int)

    add_parser = team_sub.add_parser("add", help="Add a candidate to the next open role")
    add_parser.add_argument("candidate_id")
    add_parser.add_argument("--dataset", help="Override the dataset path from settings")
    _add_criteria(add_parser)

    remove_parser = team_sub.add_parser("remove", help="Remove a candidate from the team")
    remove_parser.add_argument("candidate_id")

    team_sub.add_parser("show", help="List team members")
    team_sub.add_parser("clear", help="Remove all members and reset the team size")

    # --- review subcommand ---
    review_parser = subparsers.add_parser("review", help="Show team metrics")
    _add_common(review_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def resolve_criteria(args: argparse.Namespace, settings: Settings) -> FilterCriteria:
    """Criteria from --role, extended by any explicit keyword flags."""
    skills, experience, education = list(args.skills), list(args.experience), list(args.education)
    if args.role:
        role = settings.get_role(args.role)
        skills = role.skills + skills
        experience = role.experience + experience
        education = role.education + education
    return FilterCriteria(skills=skills, experience=experience, education=education)


def _dataset(args: argparse.Namespace, settings: Settings) -> CandidateDataset:
    path = getattr(args, "dataset", None) or settings.dataset.path
    return CandidateDataset(path, ttl_seconds=settings.dataset.cache_ttl_seconds)


def cmd_score(args: argparse.Namespace, settings: Settings) -> None:
    """Handle score subcommand."""
    criteria = resolve_criteria(args, settings)
    candidates = _dataset(args, settings).get_candidates()

    conn = init_db(settings.database.path)
    try:
        roster = Roster.from_db(conn)
    finally:
        conn.close()

    result = build_shortlist(
        candidates,
        criteria,
        cache=ScoreCache.from_config(settings.scoring),
        selected_ids=roster.member_ids,
        rank=args.rank,
    )
    shown = result.top(args.limit) if args.limit else result.scored

    if args.export == "json":
        print(export_results_json(shown))
        return

    print(describe_filters(result))
    for s in shown:
        print(
            f"  {s.score:5.1f}  {s.name} <{s.id}>  "
            f"skills {s.skill_match_percentage:.1f}% | "
            f"experience {s.experience_match_percentage:.1f}% | "
            f"education {s.education_match_percentage:.1f}% "
            f"(weight {s.education_weight:.2f})"
        )


def cmd_team(args: argparse.Namespace, settings: Settings) -> None:
    """Handle team subcommand."""
    conn = init_db(settings.database.path)
    try:
        roster = Roster.from_db(conn)
        if not roster.team_size and settings.team.size:
            roster.set_team_size(settings.team.size)

        if args.team_command == "size":
            roster.set_team_size(args.size)
            roster.save(conn)
            print(f"Team size set to {roster.team_size}")
        elif args.team_command == "add":
            if not roster.team_size:
                msg = "set a team size first: team size N"
                raise ValueError(msg)
            candidate = _dataset(args, settings).get_by_id(args.candidate_id)
            if candidate is None:
                msg = f"Unknown candidate id: {args.candidate_id}"
                raise ValueError(msg)
            criteria = resolve_criteria(args, settings)
            scored = score_candidate(
                candidate, criteria.skills, criteria.experience, criteria.education,
                weights=settings.scoring,
            )
            if not roster.add(scored):
                msg = f"Team is full ({roster.team_size} roles)"
                raise ValueError(msg)
            roster.save(conn)
            print(f"Added {scored.name} ({scored.score:.1f}) - "
                  f"{len(roster.members)} of {roster.team_size} roles filled")
        elif args.team_command == "remove":
            if roster.remove(args.candidate_id):
                roster.save(conn)
                print(f"Removed {args.candidate_id}")
            else:
                print(f"{args.candidate_id} is not on the team")
        elif args.team_command == "show":
            print(f"{len(roster.members)} of {roster.team_size} roles filled")
            for i, m in enumerate(roster.members, start=1):
                print(f"  Role {i}: {m.name} <{m.id}> {m.score:.1f}")
        elif args.team_command == "clear":
            roster.delete(conn)
            print("Team cleared")
    finally:
        conn.close()


def cmd_review(settings: Settings) -> None:
    """Handle review subcommand."""
    conn = init_db(settings.database.path)
    try:
        roster = Roster.from_db(conn)
    finally:
        conn.close()

    review = roster.review()
    status = "complete" if roster.is_complete else "incomplete"
    print(f"Team {status}: {review.filled} of {review.team_size} roles filled")
    print(f"  Team score: {review.team_score}")
    print(f"  Skills ({len(review.unique_skills)}): {', '.join(review.unique_skills)}")
    for i, m in enumerate(roster.members, start=1):
        role = m.current_role or (m.work_experiences[0].role_name if m.work_experiences else "N/A")
        degree = m.education.degrees[0].degree if m.education.degrees else "N/A"
        print(f"  Role {i}: {m.name} - {role} - {degree} - {m.score:.1f}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_yaml(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "score":
            cmd_score(args, settings)
        elif args.command == "team":
            cmd_team(args, settings)
        else:
            cmd_review(settings)
    except (DatasetError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

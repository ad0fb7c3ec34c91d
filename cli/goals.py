#!/usr/bin/env python3

import sys
from errors import InvariantViolation, PennywiseError
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all goals with their progress."""
    goals = services.goals.find_all()

    if not goals:
        logger.info("No goals found.")
        return

    logger.info("\nGoals:")
    logger.info("=" * 80)
    for goal in goals:
        logger.info(f"ID: {goal.id}")
        logger.info(f"Name: {goal.name}")
        logger.info(
            f"Saved: {goal.current_amount} / {goal.target_amount} ({goal.progress:.0%})"
        )
        if goal.target_date:
            logger.info(f"Target date: {goal.target_date.isoformat()}")
        if goal.notes:
            logger.info(f"Notes: {goal.notes}")
        logger.info("-" * 80)

    logger.info(f"\nTotal goals: {len(goals)}")


def cmd_show(args, services):
    """Show a goal and its contributions."""
    goal = services.goals.find(args.goal_id)
    if not goal:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    logger.info(f"\n{goal.name}")
    logger.info("=" * 80)
    logger.info(f"Saved: {goal.current_amount} / {goal.target_amount}")
    logger.info(f"Remaining: {goal.remaining_amount}")

    contributions = services.goals.find_contributions(goal.id)
    if not contributions:
        logger.info("No contributions yet.")
        return

    logger.info("\nContributions:")
    for contribution in contributions:
        logger.info(
            f"  {contribution.contribution_date.isoformat()}  {contribution.amount:>10}  "
            f"{contribution.notes or ''}"
        )


def cmd_create(args, services):
    """Create a new savings goal."""
    try:
        goal = services.goals.create(
            args.name, args.target_amount, args.target_date, args.notes
        )
    except PennywiseError as e:
        logger.error(f"Error creating goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal created successfully with ID: {goal.id}")
    logger.info(f"  Name: {goal.name}")
    logger.info(f"  Target: {goal.target_amount}")


def cmd_update(args, services):
    """Update a goal's name, target, date or notes."""
    goal = services.goals.find(args.goal_id)
    if not goal:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    try:
        goal = services.goals.update(
            goal.id,
            args.name if args.name is not None else goal.name,
            args.target_amount if args.target_amount is not None else goal.target_amount,
            args.target_date if args.target_date is not None else goal.target_date,
            args.notes if args.notes is not None else goal.notes,
        )
    except PennywiseError as e:
        logger.error(f"Error updating goal: {e}")
        sys.exit(1)

    logger.info(f"✓ Goal {goal.id} updated.")


def cmd_delete(args, services):
    """Delete a goal and its contributions."""
    goal = services.goals.find(args.goal_id)
    if not goal:
        logger.error(f"Goal with ID {args.goal_id} not found.")
        sys.exit(1)

    confirm = (
        input(f"\nDelete goal '{goal.name}' and all its contributions? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    if services.goals.delete(goal.id):
        logger.info(f"✓ Goal '{goal.name}' deleted successfully.")
    else:
        logger.error("Failed to delete goal.")
        sys.exit(1)


def cmd_contribute(args, services):
    """Add a manual contribution to a goal."""
    try:
        contribution, goal = services.goals.add_contribution(
            args.goal_id, args.amount, args.notes, args.date
        )
    except PennywiseError as e:
        logger.error(f"Error adding contribution: {e}")
        sys.exit(1)

    logger.info(f"✓ Contributed {contribution.amount} to '{goal.name}'")
    logger.info(f"  Saved: {goal.current_amount} / {goal.target_amount}")


def cmd_verify(args, services):
    """Check that every goal's total matches its contributions."""
    try:
        services.goals.verify_totals()
    except InvariantViolation as e:
        logger.error(f"✗ {e}")
        sys.exit(1)

    logger.info("✓ All goal totals match their contributions.")


def setup_parser(subparsers):
    """Setup goals subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "goals",
        help="Manage savings goals",
        description="Create, update and fund savings goals",
    )

    goals_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available goal commands",
        dest="subcommand",
        required=True,
    )

    # goals list
    list_parser = goals_subparsers.add_parser("list", help="List all goals")
    list_parser.set_defaults(func=cmd_list)

    # goals show
    show_parser = goals_subparsers.add_parser(
        "show", help="Show a goal and its contributions"
    )
    show_parser.add_argument("goal_id", type=int, help="ID of the goal")
    show_parser.set_defaults(func=cmd_show)

    # goals create
    create_parser = goals_subparsers.add_parser("create", help="Create a goal")
    create_parser.add_argument("name", help="Goal name")
    create_parser.add_argument("target_amount", help="Amount to save")
    create_parser.add_argument("--target-date", help="Target date (YYYY-MM-DD)")
    create_parser.add_argument("--notes", help="Optional notes")
    create_parser.set_defaults(func=cmd_create)

    # goals update
    update_parser = goals_subparsers.add_parser("update", help="Update a goal")
    update_parser.add_argument("goal_id", type=int, help="ID of the goal")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument("--target-amount", help="New target amount")
    update_parser.add_argument("--target-date", help="New target date (YYYY-MM-DD)")
    update_parser.add_argument("--notes", help="New notes")
    update_parser.set_defaults(func=cmd_update)

    # goals delete
    delete_parser = goals_subparsers.add_parser("delete", help="Delete a goal")
    delete_parser.add_argument("goal_id", type=int, help="ID of the goal")
    delete_parser.set_defaults(func=cmd_delete)

    # goals contribute
    contribute_parser = goals_subparsers.add_parser(
        "contribute", help="Add a manual contribution"
    )
    contribute_parser.add_argument("goal_id", type=int, help="ID of the goal")
    contribute_parser.add_argument("amount", help="Amount to contribute")
    contribute_parser.add_argument("--date", help="Contribution date (YYYY-MM-DD)")
    contribute_parser.add_argument("--notes", help="Optional notes")
    contribute_parser.set_defaults(func=cmd_contribute)

    # goals verify
    verify_parser = goals_subparsers.add_parser(
        "verify", help="Check goal totals against contributions"
    )
    verify_parser.set_defaults(func=cmd_verify)

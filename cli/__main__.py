#!/usr/bin/env python3
"""
Pennywise CLI - Command-line interface for tracking spending, budgets and savings goals.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories   Manage categories
    transactions Record and manage transactions
    goals        Manage savings goals
    budgets      Manage monthly budgets
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli goals create "Emergency fund" 1000
    python -m cli transactions add 250 --category Salary --goal 1
    python -m cli transactions delete 12
    python -m cli budgets set 3 400 --month 2025/06
"""

import sys
import argparse
from cli import budgets, categories, goals, migrate, transactions
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Pennywise - Personal finance tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    goals.setup_parser(subparsers)
    budgets.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""AI-powered commit categorization.

Usage:
    python scripts/ai_categorize_commits.py [--dry-run] [--force] [--repo NAME]
                                            [--limit N] [--batch-size N] [--debug]

Asks the configured LLM provider (AI_PROVIDER: openai, anthropic, gemini or
ollama) to categorize commits that have no category yet, using the file
lists from the JSON exports in EXPORTS_DIR as extra context.

Environment:
    AI_PROVIDER, AI_TIMEOUT (30), AI_RETRIES (3), AI_TEMPERATURE (0.1)
    OPENAI_API_KEY / ANTHROPIC_API_KEY / GEMINI_API_KEY, <PROVIDER>_MODEL
    OLLAMA_URL (http://localhost:11434), OLLAMA_MODEL (llama2)
    PREVENT_NUMERIC_CATEGORIES (true)

Exits 0 on success, 1 on configuration or fatal error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from gitinsight.config import get_settings
from gitinsight.db.session import SessionLocal
from gitinsight.llm.provider import LLMConfigurationError
from gitinsight.llm.router import ai_enabled, get_llm_client, validate_configuration
from gitinsight.schemas.categorization import CategorizationStats
from gitinsight.services.categorizer import DEFAULT_BATCH_SIZE, Categorizer
from gitinsight.services.category_store import SqlCategoryStore
from gitinsight.services.commit_selection import fetch_commits_to_categorize, fetch_repositories
from gitinsight.services.export_lookup import JsonExportLookup

logger = logging.getLogger("ai_categorize_commits")

RULE = "=" * 70


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Categorize commits with an LLM, using file paths from JSON exports.",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Preview categorization without updating the database"
    )
    parser.add_argument(
        "--force", action="store_true", help="Recategorize all commits, even already categorized ones"
    )
    parser.add_argument("--repo", metavar="REPO_NAME", help="Process only this repository")
    parser.add_argument("--limit", type=int, metavar="N", help="Limit number of commits per repository")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        metavar="N",
        help=f"Number of commits per transaction (default: {DEFAULT_BATCH_SIZE})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    args = parser.parse_args(argv)
    if args.batch_size <= 0:
        parser.error("--batch-size must be positive")
    if args.limit is not None and args.limit <= 0:
        parser.error("--limit must be positive")
    return args


def _check_configuration() -> bool:
    if not ai_enabled():
        logger.error("AI categorization is not enabled")
        logger.error("Please set AI_PROVIDER (openai, anthropic, gemini or ollama)")
        return False
    validation = validate_configuration()
    if validation["valid"]:
        return True
    logger.error("AI configuration is invalid:")
    for error in validation["errors"]:
        logger.error("  - %s", error)
    return False


def _print_banner(args: argparse.Namespace) -> None:
    settings = get_settings()
    print(RULE)
    print("AI-Powered Commit Categorization")
    print(RULE)
    print(f"Provider:           {settings.ai_provider.upper()}")
    print(f"Mode:               {'DRY RUN (no changes)' if args.dry_run else 'LIVE (will update database)'}")
    print(f"Force recategorize: {'YES' if args.force else 'NO'}")
    print(f"Repository filter:  {args.repo or 'ALL'}")
    print()


def _print_summary(stats: CategorizationStats) -> None:
    print(RULE)
    print("SUMMARY")
    print(RULE)
    print(f"Commits processed:        {stats.processed}")
    print(f"Successfully categorized: {stats.categorized}")
    print(f"New categories created:   {stats.new_categories}")
    if stats.errors:
        print(f"Errors:                   {stats.errors}")
    print(RULE)
    if stats.errors:
        logger.warning("Completed with %d error(s)", stats.errors)
    else:
        logger.info("All commits categorized successfully!")


def _dry_run(categorizer: Categorizer, commits, lookup) -> None:
    logger.info("[DRY RUN] Simulating categorization...")
    for commit, result, error in categorizer.preview(commits, lookup):
        if error is not None:
            logger.warning("  %s failed: %s", commit.hash[:8], error)
            continue
        print(f"  {commit.hash[:8]}: {result.category} ({result.confidence}%)")
        print(f"    Subject: {commit.subject}")
        print(f"    Reason: {result.reason}")
        print()
    logger.info("[DRY RUN] Would process %d commits", len(commits))


def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    db = SessionLocal()
    try:
        client = get_llm_client()
        categorizer = Categorizer(client, SqlCategoryStore(db))

        repositories = fetch_repositories(db, args.repo)
        if args.repo and not repositories:
            logger.error("Repository '%s' not found", args.repo)
            return 1
        logger.info("Found %d repositories to process", len(repositories))

        for repo in repositories:
            print(RULE)
            logger.info("Processing repository: %s", repo.name)
            print(RULE)

            lookup = JsonExportLookup.for_repository(settings.exports_dir, repo.name)
            if lookup is None:
                logger.warning("Skipping repository %s (run extraction first)", repo.name)
                continue
            logger.info("Loaded %d commits from JSON export", len(lookup))

            commits = fetch_commits_to_categorize(db, repo.id, force=args.force, limit=args.limit)
            if not commits:
                logger.info("All commits are already categorized!")
                continue
            logger.info("Found %d commits to categorize", len(commits))

            if args.dry_run:
                _dry_run(categorizer, commits, lookup)
            else:
                categorizer.categorize_commits(commits, lookup, batch_size=args.batch_size)
            logger.info(
                "Repository complete: %d categorized, %d errors",
                categorizer.stats.categorized,
                categorizer.stats.errors,
            )

        _print_summary(categorizer.stats)
        return 0
    except LLMConfigurationError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.error("Fatal error: %s", e, exc_info=args.debug)
        return 1
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    debug = args.debug or settings.ai_debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not _check_configuration():
        return 1
    _print_banner(args)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

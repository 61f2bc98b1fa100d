# -*- coding: utf-8 -*-
"""
Arlo coaching backend - Main Entry Point

Commands:
- log:            classify/extract a message and store it if it is a workout
- ask:            route a message and show the knowledge context (and reply)
- weekly-report:  run the weekly progress job once
- schedule:       run the weekly progress job on its configured schedule
"""

import argparse
import sys

from core import (
    OpenAIClient,
    Scheduler,
    WeeklyReportJob,
    get_embedding_provider,
    init_database,
    load_config,
)
from core.env_loader import get_env, load_env, validate_required_vars
from core.openai_client import build_user_context
from modules import ModuleRegistry
from utils.logger import get_logger, set_level


def validate_environment() -> None:
    """Ensure all required environment variables are present."""
    all_present, missing = validate_required_vars(["OPENAI_API_KEY"])

    if not all_present:
        print(f"ERROR: Missing required environment variables: {', '.join(missing)}")
        print("   Please add them to your .env file and restart.")
        sys.exit(1)


def build_services(config: dict):
    """Wire database, clients and module registry."""
    logger = get_logger("main")

    mongodb_url = get_env("MONGODB_URL", "mongodb://localhost:27017/arlo")
    db = init_database(mongodb_url)

    openai_api_key = get_env("OPENAI_API_KEY")
    openai_client = OpenAIClient(openai_api_key, model=get_env("CHAT_MODEL", "gpt-4o-mini"))
    EmbeddingProvider = get_embedding_provider()
    embedding_provider = EmbeddingProvider(
        openai_api_key,
        model=get_env("EMBEDDING_MODEL", "text-embedding-3-small")
    )

    registry = ModuleRegistry(
        db,
        config,
        timezone=config["timezone"],
        openai_client=openai_client,
        embedding_provider=embedding_provider
    )
    for module in registry.get_all_modules():
        logger.info(f"Active module: {module.get_name()}")

    return db, openai_client, registry


def build_report_job(db, openai_client, registry, config) -> WeeklyReportJob:
    workout_module = registry.get_module("workout")
    if workout_module is None:
        raise RuntimeError("The weekly report needs the workout module enabled")

    return WeeklyReportJob(
        db,
        workout_module,
        openai_client,
        min_account_age_days=config["weekly_report"].get("min_account_age_days", 5),
        deliver=lambda user_id, message: print(f"--- {user_id} ---\n{message}\n")
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Arlo coaching backend")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    log_cmd = sub.add_parser("log", help="Log a workout message")
    log_cmd.add_argument("user_id")
    log_cmd.add_argument("message")

    ask_cmd = sub.add_parser("ask", help="Send a conversational message")
    ask_cmd.add_argument("user_id")
    ask_cmd.add_argument("message")
    ask_cmd.add_argument("--reply", action="store_true", help="Also generate a coach reply")

    sub.add_parser("weekly-report", help="Run the weekly progress job now")
    sub.add_parser("schedule", help="Run the weekly progress job on schedule")

    return parser.parse_args(argv)


def main(argv=None):
    """Main application entry point."""
    load_env()
    args = parse_args(argv)
    logger = get_logger("main")

    validate_environment()
    config = load_config(args.config)
    set_level(args.log_level or get_env("LOG_LEVEL", "INFO"))

    db, openai_client, registry = build_services(config)

    if args.command in ("log", "ask"):
        outcome = registry.route_message(args.message, args.user_id)

        if outcome["module"] == "workout":
            print(outcome["confirmation"])
            return
        if args.command == "log":
            print("Not recognised as a workout log.")
            return

        knowledge_context = outcome.get("knowledge_context", "")
        if knowledge_context:
            print(knowledge_context.strip())
        else:
            print("No relevant insight found.")
        if args.reply:
            print()
            user = db["users"].find_one({"user_id": args.user_id})
            print(openai_client.coach_reply(args.message, knowledge_context, build_user_context(user)))
        return

    job = build_report_job(db, openai_client, registry, config)

    if args.command == "weekly-report":
        counts = job.run()
        print(f"Sent: {counts['sent']}, Skipped: {counts['skipped']}, Errors: {counts['errors']}")
        return

    schedule_config = config["weekly_report"]
    scheduler = Scheduler()
    scheduler.add_weekly_task(schedule_config["day"], schedule_config["time"], job.run, "weekly_report")
    for task in scheduler.get_next_run_times():
        logger.info(f"Next run of {task['task']}: {task['next_run']}")
    try:
        scheduler.run()
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")


if __name__ == "__main__":
    main()

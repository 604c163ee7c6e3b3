from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from app import AgenticAnswerService
from domain.models import CheckboxOption, QuestionType
from infra.config import FileSystemConfigProvider
from infra.llm import OpenAIChatClient
from infra.persistence import SQLiteCandidateRepository
from infra.runtime import StructuredLogger, SystemClock


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="answer-engine")
    parser.add_argument("--db-path", default="answer_engine.db")
    parser.add_argument("--config-dir", default="./config", help="Path to config folder")
    parser.add_argument("--user-id", default="local", help="User whose stored data answers questions")
    parser.add_argument("--log-level", choices=["info", "warning", "error"], default="warning")
    sub = parser.add_subparsers(dest="command", required=True)

    ask_p = sub.add_parser("ask", help="Answer one free-text question")
    ask_p.add_argument("question")
    ask_p.add_argument(
        "--type",
        dest="question_type",
        choices=[t.value for t in QuestionType],
        default=QuestionType.TEXT.value,
    )

    choose_p = sub.add_parser("choose", help="Pick one option of a checkbox/radio group")
    choose_p.add_argument("question")
    choose_p.add_argument("--option", dest="options", action="append", required=True)

    sub.add_parser("import-profile", help="Load profile.json into the database")

    check_p = sub.add_parser("check-config", help="Validate config.json and profile.json")
    check_p.add_argument(
        "--skip-connectivity",
        action="store_true",
        help="Skip the OpenAI connectivity check",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config_provider = FileSystemConfigProvider(args.config_dir)

    if args.command == "check-config":
        return _handle_check_config(args, config_provider)

    errors = config_provider.validate()
    if errors:
        print("Config validation failed:")
        for err in errors:
            print(f"  - {err}")
        return 1

    with SQLiteCandidateRepository(db_path=args.db_path) as repository:
        if args.command == "import-profile":
            return _handle_import_profile(args, config_provider, repository)
        if args.command == "ask":
            return asyncio.run(_handle_ask(args, config_provider, repository))
        if args.command == "choose":
            return asyncio.run(_handle_choose(args, config_provider, repository))

    raise SystemExit(f"Unsupported command: {args.command}")


def _build_service(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
    repository: SQLiteCandidateRepository,
) -> AgenticAnswerService:
    cfg = config_provider.get_config()
    llm = None
    if cfg.llm_enabled:
        llm = OpenAIChatClient(
            api_key=cfg.openai_key,
            base_url=cfg.openai_base_url,
            model=cfg.model,
            timeout=cfg.llm_timeout_seconds,
        )
    return AgenticAnswerService.from_config(
        cfg,
        user_id=args.user_id,
        repository=repository,
        clock=SystemClock(),
        logger=StructuredLogger(min_level=args.log_level),
        llm=llm,
    )


async def _handle_ask(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
    repository: SQLiteCandidateRepository,
) -> int:
    async with _build_service(args, config_provider, repository) as service:
        result = await service.get_answer(args.question, args.question_type)

    if result.error:
        print(f"No answer: {result.error}")
        return 1
    print(result.answer)
    print(f"confidence: {result.confidence}")
    if result.tools_used:
        print(f"tools: {', '.join(result.tools_used)}")
    return 0


async def _handle_choose(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
    repository: SQLiteCandidateRepository,
) -> int:
    options = [CheckboxOption(label=label) for label in args.options]
    async with _build_service(args, config_provider, repository) as service:
        selection = await service.analyze_checkbox_options(options, args.question)

    label = options[selection.selected_index].label
    print(f"{selection.selected_index + 1}. {label} ({selection.confidence.value})")
    if selection.reasoning:
        print(f"reason: {selection.reasoning}")
    return 0


def _handle_import_profile(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
    repository: SQLiteCandidateRepository,
) -> int:
    seed = config_provider.get_profile_seed()
    if seed is None:
        print(f"No profile.json found in {args.config_dir}")
        return 1

    repository.save_user(
        args.user_id,
        first_name=seed.first_name,
        last_name=seed.last_name,
        email=seed.email,
    )
    repository.save_job_settings(args.user_id, {**seed.settings, "resume_text": seed.resume_text})
    repository.replace_skills(args.user_id, seed.skills)
    print(
        f"Imported profile for {seed.first_name} {seed.last_name}".rstrip()
        + f" ({len(seed.skills)} skills) as user {args.user_id}",
    )
    return 0


def _handle_check_config(
    args: argparse.Namespace,
    config_provider: FileSystemConfigProvider,
) -> int:
    errors = config_provider.validate()
    if errors:
        print("Config validation failed:")
        for err in errors:
            print(f"  - {err}")
        return 1

    cfg = config_provider.get_config()
    if cfg.llm_enabled:
        print(f"Config OK: model={cfg.model}, openai_key=***{cfg.openai_key[-4:]}")
    else:
        print("Config OK: no OPENAI_KEY, answers come from stored profile data only")
    print(
        f"Rate limit: {cfg.rate_limit_max_requests} requests / {cfg.rate_limit_window_ms} ms, "
        f"cache TTL: {cfg.cache_ttl_ms} ms",
    )

    if args.skip_connectivity or not cfg.llm_enabled:
        return 0

    print("Verifying API connectivity...")
    conn_result = asyncio.run(config_provider.validate_connectivity())
    if not conn_result.ok:
        print("Connectivity check failed:")
        for err in conn_result.errors:
            print(f"  - {err}")
        return 1
    print("OpenAI API: connected")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

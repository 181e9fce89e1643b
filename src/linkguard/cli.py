"""Command-line entrypoint printing analysis results as JSON."""

from __future__ import annotations

import argparse
import json
from typing import Any, Sequence

from linkguard.agents.build import create_service
from linkguard.config.settings import AppConfig, load_config
from linkguard.core.errors import LinkguardError
from linkguard.core.logging import configure_logging
from linkguard.domain.lexicon.loader import load_lexicon


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=True, indent=2, default=str)


def run_url(url: str, *, rationale: bool = True, config: AppConfig | None = None) -> str:
    service = create_service(config or load_config()[0])
    try:
        analysis = service.check_website(url, include_rationale=None if rationale else False)
        return _dump(analysis.model_dump(mode="json"))
    finally:
        service.close()


def run_email(
    subject: str,
    body: str,
    sender: str,
    recipient: str = "",
    *,
    rationale: bool = True,
    config: AppConfig | None = None,
) -> str:
    service = create_service(config or load_config()[0])
    try:
        analysis = service.check_email(
            subject, body, sender, recipient, include_rationale=None if rationale else False
        )
        return _dump(analysis.model_dump(mode="json"))
    finally:
        service.close()


def run_keywords(config: AppConfig | None = None) -> str:
    cfg = config or load_config()[0]
    return _dump(sorted(load_lexicon(cfg.lexicon_dir).spam_keywords))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkguard")
    parser.add_argument("--log-level", help="Override the configured log level.")
    sub = parser.add_subparsers(dest="command", required=True)

    url_cmd = sub.add_parser("url", help="Analyze a single website URL.")
    url_cmd.add_argument("url")
    url_cmd.add_argument("--no-rationale", action="store_true", help="Skip the natural-language rationale.")

    email_cmd = sub.add_parser("email", help="Score an email for spam.")
    email_cmd.add_argument("--subject", default="")
    email_cmd.add_argument("--body", default="")
    email_cmd.add_argument("--sender", required=True)
    email_cmd.add_argument("--recipient", default="")
    email_cmd.add_argument("--no-rationale", action="store_true", help="Skip the natural-language rationale.")

    sub.add_parser("keywords", help="List the loaded spam keywords.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg, _ = load_config()
    configure_logging(args.log_level or cfg.log_level)
    try:
        if args.command == "url":
            print(run_url(args.url, rationale=not args.no_rationale, config=cfg))
        elif args.command == "email":
            print(
                run_email(
                    args.subject,
                    args.body,
                    args.sender,
                    args.recipient,
                    rationale=not args.no_rationale,
                    config=cfg,
                )
            )
        else:
            print(run_keywords(cfg))
    except LinkguardError as exc:
        print(_dump({"error": type(exc).__name__, "message": str(exc)}))
        return 2
    return 0

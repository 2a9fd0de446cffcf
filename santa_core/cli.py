# santa_core/cli.py
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .config import load_config
from .errors import SantaError
from .io import load_participants, load_template
from .matcher import match
from .notifier import SmtpMailer, check_template, notify_all
from .validation import validate_participants

logger = logging.getLogger(__name__)


def _level(name: Optional[str]) -> int:
    level = getattr(logging, str(name or "INFO").upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secret-santa",
        description="Draw Secret Santa pairs under exclusion rules and email each giver their recipient.",
    )
    parser.add_argument("--participants", help="Participant file (.json, .yaml or .csv). Env: PARTICIPANTS_FILE")
    parser.add_argument("--template", help="Message body template with two %%s slots. Env: MAIL_BODY_FILE")
    parser.add_argument("--subject", help="Email subject. Env: MAIL_SUBJECT")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", dest="send_mail", action="store_const", const=False,
                      help="Print pairings instead of sending (overrides SENDMAIL)")
    mode.add_argument("--send", dest="send_mail", action="store_const", const=True,
                      help="Send the emails (overrides SENDMAIL)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible draw. Env: RANDOM_SEED")
    parser.add_argument("--max-attempts", type=int, help="Random draws to try before the ILP fallback. Env: MAX_ATTEMPTS")
    parser.add_argument("--no-fallback", action="store_true", help="Fail instead of solving the ILP when sampling gives up")
    parser.add_argument("--on-send-error", choices=["abort", "continue"], help="Env: ON_SEND_ERROR")
    parser.add_argument("--log-level", help="Env: LOG_LEVEL")
    parser.add_argument("--env-file", help="Path to a .env file (default: search from the working directory)")
    return parser


def run(args: argparse.Namespace) -> int:
    overrides = {
        "participants_file": args.participants,
        "mail_body_file": args.template,
        "mail_subject": args.subject,
        "send_mail": args.send_mail,
        "random_seed": args.seed,
        "max_attempts": args.max_attempts,
        "on_send_error": args.on_send_error,
        "log_level": args.log_level,
    }
    cfg = load_config(env_file=args.env_file, overrides=overrides)
    logging.getLogger().setLevel(_level(cfg.log_level))

    participants = load_participants(cfg.participants_file)
    validate_participants(participants, require_email=cfg.send_mail)
    assignment = match(participants, rng=cfg.random_seed,
                       max_attempts=cfg.max_attempts, fallback=not args.no_fallback)

    dry_run = not cfg.send_mail
    body_template = ""
    mailer = None
    if not dry_run:
        body_template = load_template(cfg.mail_body_file)
        check_template(body_template)
        mailer = SmtpMailer(cfg.smtp_host, cfg.smtp_port, cfg.smtp_user,
                            cfg.smtp_password, timeout=cfg.smtp_timeout)

    report = notify_all(
        participants, assignment,
        subject=cfg.mail_subject,
        body_template=body_template,
        dry_run=dry_run,
        mailer=mailer,
        sender=cfg.smtp_user,
        html=cfg.mail_html,
        on_error=cfg.on_send_error,
    )
    logger.info("Done: %d participant(s) notified%s", len(report.sent), " (dry run)" if dry_run else "")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=_level(args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except SantaError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

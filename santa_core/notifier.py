"""
Notifier: renders each giver's message and dispatches it, or prints the
pairing on a dry run. Sending is sequential, one blocking SMTP exchange per
participant, in participant list order.
"""
from __future__ import annotations

import logging
import smtplib
import ssl
import sys
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional, Protocol, Sequence, TextIO, Tuple

from .errors import NotificationError
from .models import Participant

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> None: ...


def render_body(template: str, giver_name: str, recipient_name: str) -> str:
    """Fill the two ordered %s slots: giver first, then recipient."""
    try:
        return template % (giver_name, recipient_name)
    except (TypeError, ValueError) as exc:
        raise NotificationError(
            "Message template must contain exactly two %s slots (giver, recipient) "
            f"and write any literal percent sign as %%: {exc}"
        ) from exc


def check_template(template: str) -> None:
    """Render once with stand-in names so a broken template fails before any send."""
    render_body(template, "giver", "recipient")


def build_message(sender: str, to: str, subject: str, body: str, html: bool = True) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to
    if html:
        msg.set_content(body, subtype="html")
    else:
        msg.set_content(body)
    return msg


class SmtpMailer:
    """STARTTLS + login on every send, bounded by the socket timeout."""

    def __init__(self, host: str, port: int, user: str, password: str, timeout: float = 30.0):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.timeout = timeout

    def send(self, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls(context=context)
                server.login(self.user, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Failed to send email to {message['To']}: {exc}") from exc


def notify(
    giver: Participant,
    recipient_name: str,
    subject: str,
    body_template: str,
    dry_run: bool,
    mailer: Optional[Mailer] = None,
    sender: Optional[str] = None,
    html: bool = True,
    out: Optional[TextIO] = None,
) -> None:
    out = out or sys.stdout
    if dry_run:
        print(f"{giver.name} would email {recipient_name}", file=out)
        return

    if mailer is None:
        raise NotificationError("No mailer configured for a live run.")
    body = render_body(body_template, giver.name, recipient_name)
    try:
        msg = build_message(sender or "", giver.email, subject, body, html=html)
    except ValueError as exc:
        raise NotificationError(f"Cannot address email to {giver.name}: {exc}") from exc
    mailer.send(msg)
    logger.info("Sent assignment email to %s", giver.email)
    print(f"Email sent to {giver.name}", file=out)


@dataclass
class NotifyReport:
    sent: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)


def notify_all(
    participants: Sequence[Participant],
    assignment: Sequence[Participant],
    subject: str,
    body_template: str,
    dry_run: bool,
    mailer: Optional[Mailer] = None,
    sender: Optional[str] = None,
    html: bool = True,
    on_error: str = "abort",
    out: Optional[TextIO] = None,
) -> NotifyReport:
    """
    One notify() per participant, in list order.
    on_error="abort" stops at the first failure; "continue" attempts everyone
    and raises one NotificationError summarising the failures at the end.
    """
    if on_error not in ("abort", "continue"):
        raise ValueError(f"on_error must be 'abort' or 'continue', got {on_error!r}")
    if len(participants) != len(assignment):
        raise ValueError("assignment must be aligned with participants")

    report = NotifyReport()
    for giver, drawn in zip(participants, assignment):
        try:
            notify(giver, drawn.name, subject, body_template, dry_run,
                   mailer=mailer, sender=sender, html=html, out=out)
        except NotificationError as exc:
            if on_error == "abort":
                logger.error("Aborting batch after failure for %s", giver.name)
                raise
            logger.warning("Send failed for %s: %s", giver.name, exc)
            report.failures.append((giver.name, str(exc)))
            continue
        report.sent.append(giver.name)

    if report.failures:
        names = ", ".join(name for name, _ in report.failures)
        err = NotificationError(
            f"{len(report.failures)} of {len(participants)} emails failed: {names}"
        )
        err.report = report
        raise err
    return report

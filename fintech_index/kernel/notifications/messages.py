"""
Notification texts for each business event.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

SIGNATURE = "African Fintech Index Admin Panel"


@dataclass(frozen=True)
class Notice:
    subject: str
    body: str
    sms: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def _lines(*lines: str) -> str:
    return "\n".join(lines + ("", SIGNATURE))


def registration_received(name: str) -> Notice:
    return Notice(
        subject="Registration received - awaiting verification",
        body=_lines(
            f"Hello {name},",
            "",
            "Thank you for registering with the African Fintech Index.",
            "An administrator will review your account; you will be able to",
            "log in once it has been verified.",
        ),
    )


def registration_for_admin(name: str, email: str, role: str) -> Notice:
    return Notice(
        subject="New User Registration - Requires Verification",
        body=_lines(
            "New user registration requires admin verification:",
            "",
            f"- Name: {name}",
            f"- Email: {email}",
            f"- Role: {role}",
            f"- Registration Date: {_now()}",
            "",
            "Please log in to the admin panel to verify this user.",
        ),
        sms=f"New {role} registration awaiting verification: {email}",
    )


def user_verified(name: str) -> Notice:
    return Notice(
        subject="Your account has been verified",
        body=_lines(
            f"Hello {name},",
            "",
            "Your African Fintech Index account has been verified.",
            "You can now log in.",
        ),
        sms="Your African Fintech Index account has been verified.",
    )


def startup_submitted(name: str, country: str, sector: str, added_by: str) -> Notice:
    return Notice(
        subject="New Startup Submitted - Requires Verification",
        body=_lines(
            "A new startup was submitted and is pending verification:",
            "",
            f"- Name: {name}",
            f"- Country: {country}",
            f"- Sector: {sector}",
            f"- Submitted By: {added_by}",
            f"- Submission Date: {_now()}",
        ),
        sms=f"Startup '{name}' ({country}) submitted, pending verification.",
    )


def startup_verified(name: str, status: str, verified_by: str, notes: str) -> Notice:
    return Notice(
        subject=f"Startup {status.capitalize()}: {name}",
        body=_lines(
            f"The startup '{name}' was {status}.",
            "",
            f"- Verified By: {verified_by}",
            f"- Date: {_now()}",
            f"- Notes: {notes or '-'}",
        ),
        sms=f"Startup '{name}' {status} by {verified_by}.",
    )


def startups_bulk_verified(count: int, status: str, verified_by: str) -> Notice:
    return Notice(
        subject=f"Bulk Startup Verification: {count} {status}",
        body=_lines(
            f"{count} startups were marked {status} in one operation.",
            "",
            f"- Verified By: {verified_by}",
            f"- Date: {_now()}",
        ),
        sms=f"{count} startups {status} by {verified_by}.",
    )


def startup_deleted(name: str, country: str, actor: str, role: str) -> Notice:
    return Notice(
        subject=f"Startup Deleted: {name}",
        body=_lines(
            "A startup was removed from the directory:",
            "",
            f"- Name: {name}",
            f"- Country: {country}",
            f"- Deleted By: {actor} ({role})",
            f"- Date: {_now()}",
        ),
        sms=f"Startup '{name}' deleted by {actor} ({role}).",
    )


def startups_bulk_deleted(count: int, actor: str, role: str) -> Notice:
    return Notice(
        subject=f"{count} Startups Deleted",
        body=_lines(
            f"{count} startups were removed from the directory.",
            "",
            f"- Deleted By: {actor} ({role})",
            f"- Date: {_now()}",
        ),
        sms=f"{count} startups deleted by {actor} ({role}).",
    )


def country_data_uploaded(count: int, years: Iterable[int], actor: str) -> Notice:
    years_text = ", ".join(str(y) for y in sorted(set(years)))
    return Notice(
        subject="Country Data Upload Completed",
        body=_lines(
            "Country data upload has been completed:",
            "",
            f"- User: {actor}",
            f"- Records Added: {count}",
            f"- Upload Date: {_now()}",
            f"- Years Covered: {years_text}",
            "",
            "Please review and verify this uploaded data.",
        ),
        sms=f"Country data upload: {count} records added by {actor}. Please verify.",
    )


def country_data_deleted(scope: str, count: int, actor: str, role: str) -> Notice:
    return Notice(
        subject=f"Country Data Deleted ({scope})",
        body=_lines(
            "Country data has been deleted from the database:",
            "",
            f"- Scope: {scope}",
            f"- Records Deleted: {count}",
            f"- User: {actor} ({role})",
            f"- Deletion Date: {_now()}",
            "",
            "This action cannot be undone.",
        ),
        sms=f"Country data deleted ({scope}): {count} records by {actor} ({role}).",
    )

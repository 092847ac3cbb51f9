"""Email service using Resend for transactional emails.

Every send is best-effort: failures are logged and reported in the return
value, never raised, so a mail outage cannot undo a completed profile write.
"""

import html
import logging
from typing import Any

import resend

from src.core.config import get_settings

logger = logging.getLogger(__name__)

_FOOTER = """
        <hr style="margin: 30px 0; border: none; border-top: 1px solid #e5e7eb;">
        <p style="font-size: 12px; color: #6b7280; text-align: center;">
            This is an automated message from the Alumni Directory
        </p>"""


def _wrap(title: str, body: str) -> str:
    return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="color: #2563eb; text-align: center; border-bottom: 2px solid #2563eb; padding-bottom: 10px;">
        Alumni Directory
    </h1>
{body}
{_FOOTER}
</body>
</html>
"""


class EmailService:
    """Service for sending transactional emails via Resend."""

    def __init__(self) -> None:
        """Initialize email service with Resend API key."""
        settings = get_settings()
        resend.api_key = settings.resend_api_key
        self.from_email = settings.email_from_address
        self.admin_email = settings.admin_notification_email
        self.support_email = settings.support_email
        self.frontend_url = settings.frontend_url

    def _send(self, to_email: str, subject: str, html_content: str, kind: str, reply_to: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }
        if reply_to:
            params["reply_to"] = reply_to

        try:
            response = resend.Emails.send(params)
            logger.info("%s email sent to %s, id: %s", kind, to_email, response.get("id"))
            return {"success": True, "email_id": response.get("id")}

        except Exception as e:
            logger.error("Failed to send %s email to %s: %s", kind, to_email, str(e))
            return {"success": False, "error": str(e)}

    async def send_pending_signup_notice(
        self,
        first_name: str,
        last_name: str,
        user_email: str,
    ) -> dict[str, Any]:
        """Tell the administrators that a new registration is waiting.

        Args:
            first_name: Registrant's first name.
            last_name: Registrant's last name.
            user_email: Registrant's email address.

        Returns:
            dict: success flag and email id or error.
        """
        admin_url = f"{self.frontend_url}/admin"
        body = f"""
    <h2 style="color: #1e40af;">New User Signup Pending Approval</h2>
    <p>A new user has signed up and is waiting for your approval.</p>
    <p>
        <strong>First Name:</strong> {html.escape(first_name)}<br>
        <strong>Last Name:</strong> {html.escape(last_name)}<br>
        <strong>Email:</strong> {html.escape(user_email)}
    </p>
    <p>Please <a href="{admin_url}" style="color: #2563eb;">log in to the admin panel</a> to review this request.</p>
"""
        return self._send(
            self.admin_email,
            "New User Signup Pending Approval",
            _wrap("New signup", body),
            "Pending signup",
        )

    async def send_approval_status_email(
        self,
        to_email: str,
        name: str,
        approved: bool,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Tell a registrant whether their registration was approved.

        Args:
            to_email: Registrant's email address.
            name: Registrant's display name.
            approved: True for approval, False for rejection.
            reason: Rejection reason shown to the user.

        Returns:
            dict: success flag and email id or error.
        """
        if approved:
            subject = "Registration Approved! Welcome to the Community"
            body = f"""
    <h2 style="color: #16a34a;">Congratulations! Your Registration has been Approved</h2>
    <p>Dear {html.escape(name)},</p>
    <p>Your registration has been <strong>approved</strong>. You can now browse the member directory,
    save members to your own directory and keep your profile up to date.</p>
    <div style="text-align: center; margin: 30px 0;">
        <a href="{self.frontend_url}" style="background: #2563eb; color: white; padding: 12px 28px; text-decoration: none; border-radius: 6px; font-weight: 600;">
            Open the Directory
        </a>
    </div>
"""
        else:
            subject = "Registration Update Required"
            reason_block = ""
            if reason:
                reason_block = f"""
    <div style="background-color: #fef2f2; border-left: 4px solid #dc2626; padding: 16px; margin: 20px 0;">
        <h3 style="color: #dc2626; margin-top: 0;">Reason for Update Request:</h3>
        <p style="margin-bottom: 0;">{html.escape(reason)}</p>
    </div>"""
            body = f"""
    <h2 style="color: #dc2626;">Registration Requires Update</h2>
    <p>Dear {html.escape(name)},</p>
    <p>After reviewing your registration, we need you to update some information before we can approve your account.</p>
{reason_block}
    <p>Please log in and update your registration. It will be reviewed again once you resubmit.</p>
"""

        return self._send(to_email, subject, _wrap(subject, body), "Approved" if approved else "Rejected")

    async def send_issue_report(
        self,
        reporter_email: str,
        issue_type: str,
        message: str,
        profile: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Forward a user's issue report to the support inbox.

        Args:
            reporter_email: Email of the reporting user; used as reply-to.
            issue_type: Issue category.
            message: Free-text description.
            profile: Reporter's profile, summarized in the email when present.

        Returns:
            dict: success flag and email id or error.
        """
        details = ""
        if profile:
            rows = []
            name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
            if name:
                rows.append(("Name", name))
            for field, label in (
                ("organization", "Organization"),
                ("position", "Position"),
                ("phone", "Phone"),
                ("program", "Program"),
                ("graduation_year", "Graduation Year"),
            ):
                if profile.get(field):
                    rows.append((label, str(profile[field])))
            if rows:
                items = "\n".join(
                    f"        <p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in rows
                )
                details = f"""
    <div style="background-color: #f0f9ff; border: 1px solid #0ea5e9; border-radius: 8px; padding: 20px; margin: 20px 0;">
        <h3 style="color: #0c4a6e; margin-top: 0;">User Profile Information</h3>
{items}
    </div>"""

        body = f"""
    <h2 style="color: #dc2626;">Support Request - User Issue Report</h2>
    <div style="background-color: #f8fafc; border: 1px solid #e2e8f0; border-radius: 8px; padding: 20px; margin: 20px 0;">
        <p><strong>User Email:</strong> {html.escape(reporter_email)}</p>
        <p><strong>Issue Type:</strong> {html.escape(issue_type)}</p>
        <p><strong>Message:</strong></p>
        <div style="background-color: white; border: 1px solid #d1d5db; border-radius: 4px; padding: 12px;">
            {html.escape(message).replace(chr(10), "<br>")}
        </div>
    </div>
{details}
    <p>Please respond to the user at <strong>{html.escape(reporter_email)}</strong>.</p>
"""
        return self._send(
            self.support_email,
            "New Issue Reported by User",
            _wrap("Issue report", body),
            "Issue report",
            reply_to=reporter_email,
        )

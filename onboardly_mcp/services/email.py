"""
Email service for candidate notifications.

Uses fastapi-mail over SMTP with STARTTLS. Sending never raises: failures are
logged and reported as ``False``.
"""

import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from ..config import Settings, settings as default_settings
from ..models import CandidateInfo, EvaluationEmailResult

logger = logging.getLogger(__name__)

SEND_FAILED_ERROR = "Email sending failed. Check server logs for details."


class EmailService:
    """Sends plain-text email through the configured SMTP account."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

        if not self.settings.smtp_user or not self.settings.smtp_password:
            logger.warning("SMTP credentials not configured. Emails will fail.")

    def _connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            MAIL_USERNAME=self.settings.smtp_user,
            MAIL_PASSWORD=self.settings.smtp_password,
            MAIL_FROM=self.settings.mail_sender,
            MAIL_PORT=self.settings.smtp_port,
            MAIL_SERVER=self.settings.smtp_host,
            MAIL_FROM_NAME=self.settings.mail_from_name,
            MAIL_STARTTLS=True,
            MAIL_SSL_TLS=False,
            USE_CREDENTIALS=bool(self.settings.smtp_user),
            VALIDATE_CERTS=True,
        )

    async def send_email_by_address(self, email: str, subject: str, body: str) -> bool:
        """
        Send an email to a single address.

        Args:
            email: Recipient email address
            subject: Email subject
            body: Plain-text body

        Returns:
            True if the SMTP server accepted the message, False otherwise
        """
        try:
            message = MessageSchema(
                subject=subject,
                recipients=[email],
                body=body,
                subtype=MessageType.plain,
            )
            fm = FastMail(self._connection_config())
            await fm.send_message(message)
        except Exception as e:
            logger.error(f"Failed to send email to {email}: {type(e).__name__}: {e}")
            return False

        logger.info(f"Email sent to {email}: {subject}")
        return True

    def resolve_threshold(self, threshold: float | None) -> float:
        # Zero or missing falls back to the configured threshold
        return threshold or self.settings.evaluation_threshold_score

    async def send_evaluation_result_email(
        self,
        candidate: CandidateInfo,
        final_average_score: float,
        subject: str,
        body: str,
        *,
        meeting_url_base: str | None = None,
        threshold_score: float | None = None,
        is_success: bool | None = None,
    ) -> EvaluationEmailResult:
        """
        Send a pass or rejection email for an evaluated application.

        The outcome is ``is_success`` when given, else whether the score
        reaches the threshold. Successful outcomes get a meeting link at
        ``<meeting_url_base><application id>``, appended to the body unless
        the body already contains it.

        Args:
            candidate: Recipient and position of the application
            final_average_score: Evaluation score (0-100)
            subject: Email subject
            body: Email body written by the caller
            meeting_url_base: Overrides the configured meeting URL base
            threshold_score: Overrides the configured pass threshold
            is_success: Forces the outcome regardless of the threshold

        Returns:
            EvaluationEmailResult summarizing what was sent
        """
        threshold = self.resolve_threshold(threshold_score)
        url_base = meeting_url_base or self.settings.meeting_url_base

        overridden = is_success is not None
        passed = is_success if overridden else final_average_score >= threshold
        meeting_url = f"{url_base}{candidate.job_application_id}" if passed else None

        final_body = body
        if meeting_url and meeting_url not in final_body:
            final_body += f"\n\nMeeting Link: {meeting_url}"

        logger.info(
            f"Sending evaluation result email to {candidate.email} "
            f"(application={candidate.job_application_id}, score={final_average_score}, "
            f"threshold={threshold}, success={passed}, overridden={overridden})"
        )

        sent = await self.send_email_by_address(candidate.email, subject, final_body)
        if not sent:
            logger.error(f"Failed to send evaluation result email to {candidate.email}")

        return EvaluationEmailResult(
            success=sent,
            email_sent=sent,
            is_success_email=passed,
            score=final_average_score,
            threshold=threshold,
            candidate_name=candidate.name,
            candidate_email=candidate.email,
            job_title=candidate.position,
            meeting_url=meeting_url,
            error=None if sent else SEND_FAILED_ERROR,
        )


def compose_evaluation_message(
    candidate: CandidateInfo, passed: bool
) -> tuple[str, str]:
    """Default subject and body used when no agent wrote the email."""
    if passed:
        subject = f"Next steps for your {candidate.position} application"
        body = (
            f"Hi {candidate.name},\n\n"
            f"Thank you for applying for the {candidate.position} position. "
            "We were impressed by your profile and would like to invite you to an interview."
            "\n\nBest regards,\nThe Onboardly Team"
        )
    else:
        subject = f"Update on your {candidate.position} application"
        body = (
            f"Hi {candidate.name},\n\n"
            f"Thank you for applying for the {candidate.position} position. "
            "After careful review we have decided not to move forward with your application."
            "\n\nBest regards,\nThe Onboardly Team"
        )
    return subject, body

"""Email notification service using SendGrid."""

import asyncio
import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Email service for sending patient notifications."""

    def __init__(self, api_key: str = "", from_email: str = "", from_name: str = ""):
        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name

        if not self.api_key:
            logger.warning("SENDGRID_API_KEY not configured. Emails will not be sent.")
            self.client = None
            self.enabled = False
        else:
            self.client = SendGridAPIClient(self.api_key)
            self.enabled = True
            logger.info("Email service initialized successfully")

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        plain_body: Optional[str] = None,
    ) -> bool:
        """
        Send an email.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.enabled:
            logger.info("Email service disabled. Would have sent to %s: %s", to, subject)
            return False

        message = Mail(
            from_email=(self.from_email, self.from_name),
            to_emails=to,
            subject=subject,
            html_content=html_body,
        )
        if plain_body:
            message.plain_text_content = plain_body

        try:
            response = await asyncio.to_thread(self.client.send, message)
        except Exception as e:
            logger.error("Error sending email to %s: %s", to, e)
            return False

        if 200 <= response.status_code < 300:
            logger.info("Email sent successfully to %s: %s", to, subject)
            return True

        logger.error("Failed to send email to %s: %s %s", to, response.status_code, response.body)
        return False

    async def send_welcome_email(self, user_email: str, first_name: str) -> bool:
        """Send welcome email after registration."""
        subject = f"Welcome to {self.from_name}!"

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #0f766e;">Welcome, {first_name}!</h2>
                    <p>Your patient account is ready. You can now book, reschedule and
                    cancel appointments at any of our branches.</p>
                </div>
            </body>
        </html>
        """

        plain_body = (
            f"Welcome, {first_name}!\n\n"
            "Your patient account is ready. You can now book, reschedule and cancel "
            "appointments at any of our branches."
        )

        return await self.send_email(user_email, subject, html_body, plain_body)

    async def send_appointment_confirmation(
        self,
        patient_email: str,
        patient_name: str,
        service_name: str,
        branch_name: str,
        branch_address: str,
        branch_phone: str,
        appointment_date: str,
        time_slot: str,
    ) -> bool:
        """
        Send booking confirmation to the patient.

        Args:
            patient_email: Patient's email
            patient_name: Patient's name
            service_name: Service booked
            branch_name: Branch name
            branch_address: Branch street address
            branch_phone: Branch phone number
            appointment_date: Appointment date (formatted)
            time_slot: Slot start, "HH:MM"

        Returns:
            True if sent successfully, False otherwise
        """
        subject = f"Appointment Request Received - {branch_name}"

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #0f766e;">Appointment Request Received</h2>

                    <p>Hi {patient_name},</p>

                    <p>We have received your appointment request. Our team will confirm it shortly.</p>

                    <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">
                        <p><strong>Service:</strong> {service_name}</p>
                        <p><strong>Date:</strong> {appointment_date}</p>
                        <p><strong>Time:</strong> {time_slot}</p>
                        <p><strong>Branch:</strong> {branch_name}, {branch_address}</p>
                    </div>

                    <p style="color: #666; font-size: 14px; margin-top: 40px;">
                        Need to reschedule? Call us on {branch_phone}.
                    </p>
                </div>
            </body>
        </html>
        """

        plain_body = f"""
        Appointment Request Received

        Hi {patient_name},

        Service: {service_name}
        Date: {appointment_date}
        Time: {time_slot}
        Branch: {branch_name}, {branch_address}

        Need to reschedule? Call us on {branch_phone}.
        """

        return await self.send_email(patient_email, subject, html_body, plain_body)

    async def send_password_reset_email(self, user_email: str, first_name: str, reset_link: str) -> bool:
        """Send a password reset link."""
        subject = f"Reset your {self.from_name} password"
        expires_in = settings.PASSWORD_RESET_EXPIRE_MINUTES

        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
                <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                    <h2 style="color: #0f766e;">Reset Your Password</h2>
                    <p>Hi {first_name},</p>
                    <p>We received a request to reset your password. The link below
                    expires in {expires_in} minutes.</p>
                    <a href="{reset_link}" style="display: inline-block; padding: 12px 24px;
                    background: #0f766e; color: white; text-decoration: none; border-radius: 5px;
                    margin: 20px 0;">Reset Password</a>
                    <p>If you did not request this, you can ignore this email.</p>
                </div>
            </body>
        </html>
        """

        plain_body = (
            f"Hi {first_name},\n\n"
            f"Reset your password: {reset_link}\n\n"
            f"The link expires in {expires_in} minutes. Ignore this email if you did not request it."
        )

        return await self.send_email(user_email, subject, html_body, plain_body)


# Global email service instance
email_service = EmailService(
    api_key=settings.SENDGRID_API_KEY,
    from_email=settings.SENDGRID_FROM_EMAIL,
    from_name=settings.SENDGRID_FROM_NAME,
)
